"""Place page - rating summary, review form and the list of reviews."""

import logging

import streamlit as st

from rollmap.constants import AppConfig, RatingConfig
from rollmap.core.data_source import DataSourceError, PlacesClient
from rollmap.model.message import FetchFailedMessage, SavedMessage, SaveFailedMessage
from rollmap.model.rating import PlaceStats, Rating, RatingDraft
from rollmap.ui.infra import select_page, trigger_rerun
from rollmap.ui.validators import parse_price_pence, validate_location_id, validate_stars

logger = logging.getLogger(__name__)


def render_back_link() -> None:
    st.button("← Back to map", key="place_back", on_click=select_page, args=(AppConfig.PAGE_MAP,))


def render_review_form(client: PlacesClient, place_id: str) -> None:
    """Review form; on success the page reloads with the new review."""
    with st.form("review_form", clear_on_submit=True):
        st.markdown("**Add a rating**")
        stars = st.select_slider(
            "Stars",
            options=list(range(RatingConfig.MIN_STARS, RatingConfig.MAX_STARS + 1)),
            value=RatingConfig.DEFAULT_STARS,
            format_func=lambda n: "★" * n,
        )
        price = st.text_input("Price paid (optional)", placeholder="e.g. 3.50")
        sauce = st.selectbox(
            "Sauce",
            options=RatingConfig.SAUCES,
            index=RatingConfig.SAUCES.index(RatingConfig.DEFAULT_SAUCE),
        )
        extras = st.multiselect("Extras", options=RatingConfig.EXTRAS)
        notes = st.text_area("Notes (optional)", placeholder="Anything worth knowing?")
        submitted = st.form_submit_button("Submit rating", type="primary")

    if not submitted:
        return

    error = validate_stars(stars=stars)
    if error is not None:
        error.display()
        return
    price_pence, error = parse_price_pence(raw=price)
    if error is not None:
        error.display()
        return

    draft = RatingDraft(
        location_id=place_id,
        stars=stars,
        sauce=sauce,
        extras=list(extras),
        price_pence=price_pence,
        notes=notes,
    )
    try:
        client.insert_rating(draft.to_payload())
    except DataSourceError as e:
        SaveFailedMessage(error=str(e)).display()
        return

    logger.info(f"[PLACE] Rating saved for {place_id}")
    SavedMessage(what="Review").display()
    trigger_rerun()


def render_rating(rating: Rating) -> None:
    with st.container(border=True):
        col_stars, col_date = st.columns([3, 1])
        with col_stars:
            st.markdown(f"**{rating.star_bar}**")
        with col_date:
            st.caption(rating.date_text)

        details = []
        if rating.sauce:
            details.append(f"Sauce: {rating.sauce}")
        if rating.extras:
            details.append(f"Extras: {', '.join(rating.extras)}")
        if rating.price_text:
            details.append(f"Price: {rating.price_text}")
        if details:
            st.caption(" · ".join(details))
        if rating.notes:
            st.write(rating.notes)


def render_place_page() -> None:
    """Render the place page for st.session_state.place_id."""
    render_back_link()

    place_id = st.session_state.get("place_id")
    error = validate_location_id(location_id=place_id)
    if error is not None:
        # Persistent notice: the page has nothing else to show
        logger.warning(f"[PLACE] {error.message} (place_id={place_id!r})")
        st.info(error.message)
        return

    try:
        client = PlacesClient.from_config()
        with st.spinner("Loading…"):
            stats = PlaceStats.from_dict(client.fetch_point_detail(point_id=place_id))
            ratings = [Rating.from_dict(row) for row in client.fetch_ratings_for_point(point_id=place_id)]
    except DataSourceError as e:
        logger.error(f"[PLACE] Could not load {place_id}: {e}")
        st.markdown("**Couldn’t load location**")
        FetchFailedMessage(error=str(e)).display()
        return

    st.header(stats.name)
    if stats.description:
        st.caption(stats.description)
    st.markdown(f"**{stats.header_text}**")

    render_review_form(client=client, place_id=stats.location_id)

    st.subheader("Reviews")
    if not ratings:
        st.caption("No reviews yet. Be the first!")
    for rating in ratings:
        render_rating(rating=rating)
