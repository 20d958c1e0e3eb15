import pytest

pytest.importorskip("pandas")
pytest.importorskip("streamlit")

from admin import bookings_frame  # noqa: E402
from factories import make_booking  # noqa: E402

def test_bookings_frame_sorts_newest_first():
    df = bookings_frame([
        make_booking(id="a", date="2025-03-10", time="09:00"),
        make_booking(id="b", date="2025-03-12", time="08:00"),
        make_booking(id="c", date="2025-03-10", time="15:00"),
    ])

    assert list(df["id"]) == ["b", "c", "a"]
    assert "firstName" in df.columns

def test_bookings_frame_empty():
    df = bookings_frame([])

    assert df.empty
    assert "date" in df.columns
