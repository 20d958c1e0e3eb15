import streamlit as st
import pandas as pd

from clinic_booking.core.config import settings
from clinic_booking.storage.factory import build_store

COLUMNS = ["id", "date", "time", "firstName", "lastName", "email", "phone", "service", "price", "status", "createdAt"]

def bookings_frame(bookings) -> pd.DataFrame:
    """Bookings as a table, newest appointment first."""
    rows = [b.to_document() for b in bookings]
    df = pd.DataFrame(rows, columns=COLUMNS)
    if df.empty:
        return df
    return df.sort_values(["date", "time"], ascending=False).reset_index(drop=True)

def main():
    st.set_page_config(
        page_title="HARMONIA Admin",
        page_icon="📅",
        layout="centered"
    )
    st.title(f"{settings.CLINIC_NAME} - Panel administracyjny")

    store = build_store(settings)

    if st.button("Odśwież dane"):
        st.rerun()

    stats = store.stats(pd.Timestamp.now(tz="UTC").date().isoformat())
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Wszystkie", stats.total)
    col2.metric("Dzisiaj", stats.today)
    col3.metric("Nadchodzące", stats.upcoming)
    col4.metric("Minione", stats.past)

    query = st.text_input("Szukaj (imię, nazwisko, email, telefon)")
    bookings = store.search(query) if query.strip() else store.list()
    df = bookings_frame(bookings)

    st.subheader("Lista rezerwacji")
    if df.empty:
        st.info("Brak rezerwacji.")
    else:
        st.dataframe(
            df,
            use_container_width=True,
            column_config={
                "createdAt": st.column_config.TextColumn("Utworzono"),
                "date": "Data",
                "time": "Godzina",
                "firstName": "Imię",
                "lastName": "Nazwisko",
                "service": "Usługa",
                "id": "ID"
            }
        )

    store.close()

    st.markdown("---")
    st.caption(f"Booking System • {settings.CLINIC_NAME}")

if __name__ == "__main__":
    main()
