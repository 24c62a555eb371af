from listing_pipeline.domain.filename_matcher import DEFAULT_PATTERNS, match_images

PLACEHOLDER = "/images/placeholder-property.png"


def _names(files):
    return {f.url: f.name for f in files}


def test_text_pattern_collects_main_and_gallery(drive_file):
    files = [
        drive_file("3-Lakeview-2BHK-2.jpg"),
        drive_file("3-Lakeview-2BHK-1.jpg"),
        drive_file("3_Lakeview_Floor 9_3.png"),
        drive_file("4-Lakeview-1.jpg"),
    ]
    names = _names(files)

    images = match_images(3, files, placeholder_url=PLACEHOLDER)

    assert images.matched
    assert names[images.main_image] == "3-Lakeview-2BHK-1.jpg"
    assert [names[u] for u in images.gallery] == ["3-Lakeview-2BHK-2.jpg", "3_Lakeview_Floor 9_3.png"]


def test_sequence_number_is_not_a_prefix_match(drive_file):
    files = [drive_file("13-Tower-1.jpg"), drive_file("30-Tower-1.jpg"), drive_file("Property 31 - 1.jpg")]

    images = match_images(3, files, placeholder_url=PLACEHOLDER)

    assert not images.matched
    assert images.main_image == PLACEHOLDER
    assert images.gallery == []


def test_bare_and_marker_patterns(drive_file):
    bare = match_images(7, [drive_file("7-1.jpeg"), drive_file("7 2.JPG")], placeholder_url=PLACEHOLDER)
    assert bare.has_main_image
    assert len(bare.gallery) == 1

    marked = match_images(5, [drive_file("Property 5 - front 1.jpg")], placeholder_url=PLACEHOLDER)
    assert marked.main_image == "https://drive.google.com/uc?export=view&id=id-Property_5_-_front_1.jpg"


def test_first_matching_pattern_wins(drive_file):
    # "3-2.jpg" only fits the bare pattern, which never gets consulted
    files = [drive_file("3-2.jpg"), drive_file("3-Lakeview-1.jpg")]

    images = match_images(3, files, placeholder_url=PLACEHOLDER)

    assert images.images == ((1, files[1].url),)
    assert images.gallery == []


def test_duplicate_ordinal_keeps_first_in_listing_order(drive_file):
    files = [drive_file("3-Front-1.jpg"), drive_file("3-Back-1.jpg"), drive_file("3-Side-2.jpg")]

    images = match_images(3, files, placeholder_url=PLACEHOLDER)

    assert images.main_image == files[0].url
    assert images.gallery == [files[2].url]


def test_gallery_without_main_image_keeps_placeholder(drive_file):
    files = [drive_file("8-Hall-2.jpg"), drive_file("8-Kitchen-3.jpg")]

    images = match_images(8, files, placeholder_url=PLACEHOLDER)

    assert images.matched
    assert not images.has_main_image
    assert images.main_image == PLACEHOLDER
    assert images.gallery == [files[0].url, files[1].url]


def test_same_input_same_output(drive_file):
    files = [drive_file(n) for n in ("2-A-1.jpg", "2-A-3.jpg", "2-A-2.jpg", "12-A-1.jpg")]

    first = match_images(2, files, placeholder_url=PLACEHOLDER)
    second = match_images(2, list(files), placeholder_url=PLACEHOLDER, patterns=DEFAULT_PATTERNS)

    assert first == second
    assert [o for o, _ in first.images] == [1, 2, 3]
