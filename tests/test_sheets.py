import pytest

from listing_pipeline.adapters.sheets import read_source_rows, row_from_record, rows_from_records


def test_spreadsheet_headers_map_onto_row_fields():
    row = row_from_record(
        {
            "S.No": 3.0,
            "City": "Hyderabad",
            "Location": "Kokapet",
            "Project Name": "Rajapushpa Provincia",
            "Property Type": "Apartment",
            "Configuration": "3 BHK",
            "Sqft": "1,950",
            "Parkings": 2.0,
            "Price": "2,10,00,000",
            "Total Floors": 39.0,
            "ORR Exit": "Exit 1",
            "Exit Distance": "2 km",
            "IT Hub Name": "Financial District",
            "Amenities": "Gym, Pool ,",
            "Unmapped Column": "ignored",
        }
    )

    assert row.sequence_number == 3
    assert row.project_name == "Rajapushpa Provincia"
    assert row.sqft == 1950.0
    assert row.parkings == 2
    assert row.price == 21_000_000.0
    assert row.total_floors == "39"
    assert row.orr_exit == "Exit 1"
    assert row.exit_distance == "2 km"
    assert row.it_hub_name == "Financial District"
    assert row.amenities == ("Gym", "Pool")
    assert row.status == "active"
    assert row.ownership_type is None


def test_camel_case_keys_map_the_same_way():
    row = row_from_record({"sNo": 1, "city": "Hyderabad", "projectName": "Lodha Bellezza", "furnishingStatus": "Semi"})

    assert row.project_name == "Lodha Bellezza"
    assert row.furnishing_status == "Semi"
    assert row.location == ""


def test_missing_or_duplicate_sequence_numbers_are_rejected():
    with pytest.raises(ValueError, match="Row 2"):
        rows_from_records([{"S.No": 1}, {"City": "Hyderabad"}])

    with pytest.raises(ValueError, match="duplicate S.No 1"):
        rows_from_records([{"S.No": 1}, {"S.No": "1"}])


def test_reads_csv(tmp_path):
    path = tmp_path / "listings.csv"
    path.write_text(
        "S.No,City,Location,Project Name,Property Type,Configuration,Sqft,School1 Name,School1 Distance\n"
        "1,Hyderabad,Narsingi,My Home Avatar,Apartment,3 BHK,1850,DPS,1 km\n"
        ",,,,,,,,\n"
        "2,Hyderabad,Gachibowli,Aparna Zenon,Villa,4 BHK,,,\n",
        encoding="utf-8",
    )

    rows = read_source_rows(path)

    assert [r.sequence_number for r in rows] == [1, 2]
    assert rows[0].school1_name == "DPS"
    assert rows[1].sqft is None
    assert rows[1].school1_name == ""


def test_unsupported_extension(tmp_path):
    path = tmp_path / "listings.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError, match="Only .csv"):
        read_source_rows(path)
