from listing_pipeline.domain.slugs import SlugRegistry, ensure_unique, slugify


def test_slugify_collapses_punctuation_and_case():
    assert slugify("3 BHK Apartment for Sale in My Home Avatar, Narsingi") == (
        "3-bhk-apartment-for-sale-in-my-home-avatar-narsingi"
    )
    assert slugify("  --Sector 150 / Noida--  ") == "sector-150-noida"
    assert slugify("") == ""


def test_ensure_unique_appends_incrementing_suffix():
    registry = SlugRegistry(["villa-narsingi"])

    assert ensure_unique("villa-narsingi", registry) == "villa-narsingi-2"
    assert ensure_unique("villa-narsingi", registry) == "villa-narsingi-3"
    assert ensure_unique("villa-kokapet", registry) == "villa-kokapet"
    assert "villa-narsingi-3" in registry
    assert len(registry) == 4


def test_registry_ignores_empty_existing_values():
    registry = SlugRegistry(["a", "", None, "b"])
    assert len(registry) == 2
