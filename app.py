"""
InquiryLab - Guided Inquiry Science Lesson

Streamlit application playing the yeast respiration lesson: a tutor chat on
the left, the virtual lab bench on the right.

Usage:
    streamlit run app.py
"""

import logging
import time

import streamlit as st

from inquirylab.classroom import (
    Interpreter,
    LearnerState,
    Scheduler,
    load_script,
)
from inquirylab.config import settings
from inquirylab.schemas import InterpreterStatus
from inquirylab.utils import normalize_learner_text
from inquirylab.viewer import (
    TranscriptPresentation,
    RESEARCH_QUESTION,
    PREPARATION_CHECKLIST,
    MODULE_LABELS,
    PhaseStatus,
    get_chat_css,
    get_lab_css,
    render_message_html,
    format_choice_label,
    render_group_html,
    render_tools_html,
    render_flow_chart_html,
    progress_percent,
    module_label_states,
)


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Longest single wait before the page reruns to fire a pending auto-advance
MAX_POLL_SECONDS = 0.5

st.set_page_config(
    page_title="InquiryLab",
    page_icon="🔬",
    layout="wide",
    initial_sidebar_state="collapsed",
)


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

@st.cache_resource
def get_script():
    """Lesson script, loaded once per server process."""
    return load_script(settings.LESSON_PATH)


def init_session_state():
    """Create one interpreter per browser session."""
    if "interpreter" in st.session_state:
        return

    state = LearnerState()
    presentation = TranscriptPresentation(state)
    scheduler = Scheduler()
    interpreter = Interpreter(
        get_script(),
        state,
        presentation,
        scheduler,
        time_scale=settings.TIME_SCALE,
    )

    st.session_state.learner_state = state
    st.session_state.presentation = presentation
    st.session_state.scheduler = scheduler
    st.session_state.interpreter = interpreter
    st.session_state.celebrated = False
    interpreter.start()


def restart_lesson():
    """Cancel pending steps, clear everything and start over."""
    st.session_state.interpreter.reset()
    st.session_state.presentation.reset()
    st.session_state.celebrated = False
    st.session_state.interpreter.start()


# -----------------------------------------------------------------------------
# Header
# -----------------------------------------------------------------------------

def render_header():
    presentation = st.session_state.presentation

    col1, col2 = st.columns([3, 1])
    with col1:
        st.title("🔬 细胞探究实验室")
    with col2:
        if st.button("🔄 重新开始", use_container_width=True):
            restart_lesson()
            st.rerun()

    st.progress(progress_percent(presentation.module) / 100)
    labels = []
    for label, status in module_label_states(presentation.module):
        if status == PhaseStatus.COMPLETED:
            labels.append(f"✅ {label}")
        elif status == PhaseStatus.ACTIVE:
            labels.append(f"**▶ {label}**")
        else:
            labels.append(f"○ {label}")
    st.markdown(" · ".join(labels))

    if presentation.question_visible:
        st.info(RESEARCH_QUESTION)


# -----------------------------------------------------------------------------
# Chat Column
# -----------------------------------------------------------------------------

def render_chat():
    interpreter = st.session_state.interpreter
    presentation = st.session_state.presentation

    st.markdown(get_chat_css(), unsafe_allow_html=True)
    for entry in presentation.entries:
        if entry.role == "system":
            continue  # shown as the banner
        st.markdown(render_message_html(entry.role, entry.content), unsafe_allow_html=True)

    if interpreter.status == InterpreterStatus.AWAITING_CHOICE:
        for index, option in enumerate(presentation.choices):
            if st.button(format_choice_label(index, option), key=f"choice-{interpreter.current_index}-{index}",
                         use_container_width=True):
                interpreter.submit_choice(option)
                st.rerun()

    elif interpreter.status == InterpreterStatus.AWAITING_TEXT:
        raw = st.chat_input("输入你的回答...")
        if raw is not None:
            text = normalize_learner_text(raw)
            if text is None:
                st.warning("请先输入你的回答。")
            else:
                interpreter.submit_text(text)
                st.rerun()

    elif interpreter.awaiting_advance:
        if st.button("继续 →", key=f"advance-{interpreter.current_index}"):
            interpreter.advance()
            st.rerun()


# -----------------------------------------------------------------------------
# Lab Column
# -----------------------------------------------------------------------------

def render_lab():
    lab = st.session_state.presentation.lab

    st.markdown(get_lab_css(), unsafe_allow_html=True)
    st.subheader("🧪 实验台")
    st.markdown(f'<div class="lab-status">{lab.status}</div>', unsafe_allow_html=True)

    if lab.is_visible("placeholder"):
        st.markdown("🔬 实验工具将在这里显示")

    if lab.is_visible("toolbox") and lab.tools:
        st.markdown(render_tools_html(lab.tools, lab.highlighted_tool), unsafe_allow_html=True)

    if lab.is_visible("preparation"):
        st.markdown("**📋 实验准备清单**")
        st.markdown("\n".join(f"- ✅ {item}" for item in PREPARATION_CHECKLIST))

    if lab.is_visible("groups") and lab.groups:
        columns = st.columns(len(lab.groups))
        for column, group in zip(columns, lab.groups):
            with column:
                st.markdown(
                    render_group_html(group, active=group["index"] in lab.active_groups),
                    unsafe_allow_html=True,
                )

    if lab.is_visible("data_table"):
        st.dataframe(lab.data_table(), use_container_width=True)

    if lab.is_visible("chart"):
        st.pyplot(lab.chart())

    if lab.is_visible("prediction_compare"):
        compare = lab.prediction_compare()
        col1, col2 = st.columns(2)
        with col1:
            st.markdown(f"**🔮 你的预测**\n\n{compare['prediction_text']}")
        with col2:
            st.markdown(f"**🔬 实验结果**\n\n{compare['actual_text']}")
        if compare["is_match"]:
            st.success("✓ 预测正确！")

    if lab.is_visible("flow_chart"):
        st.markdown(render_flow_chart_html(), unsafe_allow_html=True)


# -----------------------------------------------------------------------------
# Summary
# -----------------------------------------------------------------------------

def render_summary():
    summary = st.session_state.presentation.summary
    if summary is None:
        return

    if not st.session_state.celebrated:
        st.balloons()
        st.session_state.celebrated = True

    st.divider()
    st.subheader("🔬 探究总结")
    st.markdown("\n".join(f"- {item}" for item in summary.items))
    if summary.learner_conclusion:
        st.markdown(f"**你的结论：** {summary.learner_conclusion}")
    st.caption(" · ".join(MODULE_LABELS))


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    init_session_state()
    scheduler = st.session_state.scheduler

    # Fire auto-advances that came due since the last rerun
    scheduler.run_due()

    render_header()
    col_chat, col_lab = st.columns([3, 2])
    with col_chat:
        render_chat()
    with col_lab:
        render_lab()
    render_summary()

    next_due = scheduler.next_due()
    if next_due is not None:
        time.sleep(min(max(next_due - scheduler.clock(), 0.0), MAX_POLL_SECONDS))
        st.rerun()


if __name__ == "__main__":
    main()
