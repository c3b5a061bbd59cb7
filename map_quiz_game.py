# map_quiz_game.py
import datetime
import logging
import pathlib
import time
from typing import Tuple

import streamlit as st
import streamlit.components.v1 as components

from quiz_config import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    DATASET_SOURCE,
    DEFAULT_LANGUAGE,
    FRAME_INTERVAL_S,
    LOG_FILE,
    LOG_LEVEL,
    MAP_IMAGE_PATH,
    MAX_HINT_TIER,
    STREAK_GOAL,
)
from quiz_dataset import (
    CapitalStore,
    DataUnavailableError,
    EmptyCollectionError,
    QuizData,
    load_map_image,
    load_quiz_data,
)
from quiz_logging import level_from_name, setup_logging
from quiz_map import MapRenderer, PlotlyCanvas
from quiz_panels import format_coordinates, format_number, rolling_history_html
from quiz_scheduler import Scheduler
from quiz_session import QuizSession, QuizState
from quiz_translations import Language, Translator

setup_logging(level_from_name(LOG_LEVEL), LOG_FILE)
logger = logging.getLogger(__name__)

TRANSLATOR = Translator()


# ---------- Data ----------
@st.cache_data(ttl=60 * 60)
def load_dataset(source: str) -> QuizData:
    # Exceptions are not cached, so a failed load is reported again on the next run
    return load_quiz_data(source)


@st.cache_data
def load_image(path: str) -> str:
    return load_map_image(path)


def new_session(data: QuizData, image: str, language: Language) -> Tuple[QuizSession, MapRenderer]:
    """Wire store, session and renderer together and open the first question."""
    scheduler = Scheduler()
    session = QuizSession(CapitalStore(data.capitals), TRANSLATOR, scheduler, language=language)
    canvas = PlotlyCanvas(CANVAS_WIDTH, CANVAS_HEIGHT)
    renderer = MapRenderer(data.map_dimensions, data.capitals, canvas, scheduler, image=image)
    renderer.bind(session)
    session.start()
    return session, renderer


# ---------- Footer ----------
def render_footer() -> None:
    """Render a small footer indicating creation date and purpose."""
    try:
        stats = pathlib.Path(__file__).resolve().stat()
        created_ts = getattr(stats, "st_birthtime", stats.st_ctime)
    except OSError:
        created_ts = time.time()
    created_str = datetime.datetime.fromtimestamp(created_ts).strftime("%B %d, %Y")

    st.write("---")
    st.markdown(
        (
            f"<div style='color:#64748b;font-size:12px;text-align:center;'>"
            f"Created {created_str}. Made for practising the capitals of Europe on the map."
            f"</div>"
        ),
        unsafe_allow_html=True,
    )


# ---------- App UI ----------
st.set_page_config(page_title="Capital Map Quiz", layout="wide")

if "language" not in st.session_state:
    st.session_state["language"] = Language.parse(DEFAULT_LANGUAGE)
language: Language = st.session_state["language"]

# Introduction page (shown until user starts)
if "show_intro" not in st.session_state:
    st.session_state["show_intro"] = True

if st.session_state["show_intro"]:
    st.title(f"🗺️ {TRANSLATOR.ui(language, 'title')}")
    st.markdown("Find the capital, type its name, and watch it light up on the map.")
    st.write("---")
    st.subheader("How it works")
    st.markdown(
        "- Type the capital in English or Dutch; partial names count.\n"
        "- Hints cost points: 75% after the first, 50% after the second, 25% with multiple choice.\n"
        f"- {STREAK_GOAL} hint-free answers in a row earn a celebration.\n"
        "- The rolling score covers your last 20 questions."
    )
    if st.button("Start playing", type="primary"):
        st.session_state["show_intro"] = False
        st.rerun()
    render_footer()
    st.stop()

# Load data once; failures end the session here
try:
    quiz_data = load_dataset(DATASET_SOURCE)
    map_image = load_image(str(MAP_IMAGE_PATH))
    if not quiz_data.capitals:
        raise EmptyCollectionError("the dataset contains no capitals")
except (DataUnavailableError, EmptyCollectionError) as exc:
    logger.error("Quiz cannot start: %s", exc)
    st.error(f"{TRANSLATOR.ui(language, 'loading_failed')}: {exc}")
    st.stop()

if "session" not in st.session_state:
    st.session_state["session"], st.session_state["renderer"] = new_session(quiz_data, map_image, language)

session: QuizSession = st.session_state["session"]
renderer: MapRenderer = st.session_state["renderer"]
session.set_language(language)

# ---------- Sidebar ----------
with st.sidebar:
    st.subheader(TRANSLATOR.ui(language, "language"))
    toggle_label = "🇳🇱 NL" if language is Language.EN else "🇬🇧 EN"
    if st.button(toggle_label):
        st.session_state["language"] = session.toggle_language()
        st.rerun()
    st.write("---")
    if st.button("🔄 New session"):
        session.close()
        st.session_state["session"], st.session_state["renderer"] = new_session(quiz_data, map_image, language)
        st.session_state.pop("celebration_seen", None)
        st.rerun()

# ---------- Header ----------
stats = session.stats()
st.title(f"🗺️ {TRANSLATOR.ui(language, 'title')}")
m1, m2, m3, m4 = st.columns(4)
m1.metric(TRANSLATOR.ui(language, "score"), f"{stats.score:g} / {stats.questions_answered}")
m2.metric(TRANSLATOR.ui(language, "total_capitals"), quiz_data.metadata.total_capitals)
m3.metric(TRANSLATOR.ui(language, "accuracy"), f"{stats.accuracy}%")
m4.metric(TRANSLATOR.ui(language, "streak"), f"{stats.streak}/{STREAK_GOAL}")

# ---------- Celebration ----------
if session.celebrating:
    if not st.session_state.get("celebration_seen", False):
        st.balloons()
        st.session_state["celebration_seen"] = True
    cel_col, close_col = st.columns([4, 1])
    cel_col.success(f"🎉 {TRANSLATOR.ui(language, 'celebration')}")
    if close_col.button(TRANSLATOR.ui(language, "close")):
        session.end_celebration()
        st.session_state["celebration_seen"] = False
        st.rerun()
else:
    # Re-arm the balloons for the next celebration
    st.session_state["celebration_seen"] = False


@st.fragment(run_every=FRAME_INTERVAL_S)
def render_map() -> None:
    """Pump the scheduler and redraw; the whole page reruns when the question or celebration changes."""
    before = (session.state, session.data.active_id, session.celebrating)
    session.scheduler.run_pending()
    st.plotly_chart(
        renderer.canvas.figure(),
        use_container_width=True,
        config={"displayModeBar": False, "staticPlot": True},
    )
    if (session.state, session.data.active_id, session.celebrating) != before:
        st.rerun()


map_col, quiz_col = st.columns([2, 1])
with map_col:
    render_map()

with quiz_col:
    entity = session.active_entity
    country_name = TRANSLATOR.country(language, entity.country)
    st.markdown(f"<div style='font-size:48px;text-align:center;'>{entity.flag}</div>", unsafe_allow_html=True)
    st.subheader(f"{TRANSLATOR.ui(language, 'what_is_capital')} {country_name}?")
    if not entity.on_map:
        st.caption(f"🟠 ({TRANSLATOR.ui(language, 'not_on_map')})")
    st.caption(f"{TRANSLATOR.ui(language, 'population')}: {format_number(entity.population)}")

    question_key = f"{session.data.questions_answered}_{entity.id}"
    if session.state is QuizState.PRESENTING:
        with st.form(key=f"answer_form_{question_key}"):
            user_input = st.text_input(
                TRANSLATOR.ui(language, "enter_capital"),
                key=f"input_{question_key}",
                placeholder=TRANSLATOR.ui(language, "enter_capital"),
            )
            c_submit, c_skip = st.columns(2)
            submitted = c_submit.form_submit_button(TRANSLATOR.ui(language, "submit_answer"), type="primary")
            skipped = c_skip.form_submit_button(TRANSLATOR.ui(language, "skip"))

        if submitted and session.submit(user_input) is not None:
            st.rerun()
        if skipped and session.skip():
            st.rerun()

        hint_label = f"💡 {TRANSLATOR.ui(language, 'hint')} ({session.hint_tier}/{MAX_HINT_TIER})"
        if st.button(hint_label, disabled=session.hint_tier >= MAX_HINT_TIER):
            session.request_hint()
            st.rerun()

        hint = session.hint
        if hint is not None:
            st.info("\n\n".join(hint.lines(TRANSLATOR, language)))
            if hint.choices:
                choice_cols = st.columns(len(hint.choices))
                for col, choice in zip(choice_cols, hint.choices):
                    if col.button(choice, key=f"choice_{question_key}_{choice}"):
                        session.submit(choice)
                        st.rerun()
    else:
        evaluation = session.last_evaluation
        if evaluation is not None and evaluation.correct:
            st.success(session.feedback)
        elif evaluation is not None:
            st.error(session.feedback)
        st.markdown(
            f"**{TRANSLATOR.ui(language, 'region')}:** {entity.region or 'N/A'}  \n"
            f"**{TRANSLATOR.ui(language, 'area')}:** {format_number(entity.area)} km²  \n"
            f"**{TRANSLATOR.ui(language, 'coordinates')}:** {format_coordinates(entity)}"
        )
        st.caption(TRANSLATOR.ui(language, "next_question"))

    # Rolling score
    if stats.history:
        st.write("---")
        st.subheader(TRANSLATOR.ui(language, "rolling_score"))
        count = len(stats.history)
        st.markdown(
            f"<span style='font-size:28px;font-weight:700;color:#2563eb;'>{stats.rolling_score}%</span> "
            f"<span style='color:#64748b;'>({TRANSLATOR.ui(language, 'last')} {count} "
            f"{TRANSLATOR.ui(language, 'questions')})</span>",
            unsafe_allow_html=True,
        )
        components.html(
            rolling_history_html(stats.history, stats.questions_answered, language, TRANSLATOR),
            height=min(440, 22 * count + 20),
            scrolling=True,
        )

render_footer()
