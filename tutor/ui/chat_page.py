"""NiceGUI chat page: subject sidebar, transcript and multimodal input."""

import html
import logging
import os

from nicegui import events, ui

from tutor.agent.subjects import SUBJECTS
from tutor.models.schemas import Message, Role, Subject
from tutor.session.gateway import API_BASE_URL, ApiGateway
from tutor.session.state import SessionState, StagedImage
from tutor.session.store import SessionStore
from tutor.ui.markdown import markdown_to_html

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "120"))

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body {
        background: radial-gradient(circle at top left, #1e1b4b 0%, #020617 60%);
        color: #e2e8f0;
        min-height: 100vh;
    }

    .sidebar {
        background: rgba(15, 23, 42, 0.6) !important;
        backdrop-filter: blur(24px);
        border-right: 1px solid rgba(255, 255, 255, 0.05);
    }

    .subject-card {
        border: 1px solid transparent;
        border-radius: 12px;
        transition: background 0.2s, border-color 0.2s;
        cursor: pointer;
    }
    .subject-card:hover { background: rgba(255, 255, 255, 0.05); }
    .subject-card.active {
        background: rgba(99, 102, 241, 0.15);
        border-color: rgba(99, 102, 241, 0.4);
    }

    .message-user {
        background: linear-gradient(135deg, #6366f1 0%, #7c3aed 100%);
        color: white;
        border-radius: 24px 24px 4px 24px;
    }

    .message-model {
        background: rgba(30, 41, 59, 0.5);
        backdrop-filter: blur(12px);
        border: 1px solid rgba(255, 255, 255, 0.05);
        color: #e2e8f0;
        border-radius: 4px 24px 24px 24px;
    }

    .typing-dot {
        width: 8px; height: 8px;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(1) { background: #818cf8; }
    .typing-dot:nth-child(2) { background: #c084fc; animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { background: #f472b6; animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .input-bar {
        background: rgba(15, 23, 42, 0.6);
        backdrop-filter: blur(24px);
        border: 1px solid rgba(255, 255, 255, 0.1);
        border-radius: 24px;
    }
    .input-bar:focus-within { border-color: rgba(99, 102, 241, 0.5); }

    .message-model strong { font-weight: 600; color: white; }
    .message-model code { font-family: 'Menlo', 'Monaco', monospace; }
</style>
"""


def render_message(msg: Message) -> None:
    is_user = msg.role == Role.USER
    align = "justify-end" if is_user else "justify-start"
    bubble = "message-user" if is_user else "message-model"

    with ui.row().classes(f"w-full {align}"):
        with ui.column().classes("max-w-[80%] gap-1"):
            with ui.element("div").classes(f"px-5 py-4 {bubble}"):
                if msg.image:
                    ui.image(msg.image_data_url).classes(
                        "w-64 max-w-full rounded-xl mb-2"
                    )
                if is_user:
                    content = html.escape(msg.content).replace("\n", "<br>")
                else:
                    content = markdown_to_html(msg.content)
                if content:
                    ui.html(content, sanitize=False).classes("text-sm leading-relaxed")
            ui.label(msg.timestamp.astimezone().strftime("%H:%M")).classes(
                f"text-[10px] text-slate-500 {'self-end' if is_user else 'self-start'}"
            )


def render_typing_indicator() -> None:
    with ui.row().classes("w-full justify-start"):
        with ui.element("div").classes("message-model px-5 py-4"):
            with ui.row().classes("gap-1 items-center"):
                for _ in range(3):
                    ui.element("div").classes("typing-dot")


@ui.page("/")
def chat_page() -> None:
    """Main chat page. Every browser tab gets its own in-memory session."""
    ui.add_head_html(CUSTOM_CSS)
    ui.query(".nicegui-content").classes("p-0")

    gateway = ApiGateway(API_BASE_URL, timeout=REQUEST_TIMEOUT)
    store = SessionStore(gateway, timeout=REQUEST_TIMEOUT)

    input_field: ui.textarea
    scroll_area: ui.scroll_area
    live_row: ui.row | None = None
    live_reply: ui.html | None = None
    live_text = ""

    def on_chunk(content: str) -> None:
        nonlocal live_row, live_reply, live_text
        live_text += content
        if live_reply is None:
            # First chunk replaces the typing indicator with a growing bubble.
            messages_view.refresh()
            with messages_container, ui.row().classes("w-full justify-start") as live_row:
                with ui.element("div").classes("message-model px-5 py-4 max-w-[80%]"):
                    live_reply = ui.html("", sanitize=False).classes("text-sm leading-relaxed")
        live_reply.set_content(markdown_to_html(live_text))
        scroll_area.scroll_to(percent=1.0)

    def drop_live_reply() -> None:
        nonlocal live_row, live_reply, live_text
        if live_row is not None:
            live_row.delete()
        live_row, live_reply, live_text = None, None, ""

    gateway.on_chunk = on_chunk

    @ui.refreshable
    def messages_view() -> None:
        state = store.state
        for msg in state.transcript:
            render_message(msg)
        if state.pending and not live_text:
            render_typing_indicator()

    @ui.refreshable
    def subjects_view() -> None:
        state = store.state
        for subject in Subject:
            config = SUBJECTS[subject]
            active = subject == state.active_subject
            with (
                ui.row()
                .classes(f"subject-card w-full items-center gap-3 px-4 py-3 {'active' if active else ''}")
                .on("click", lambda s=subject: store.select_subject(s))
            ):
                ui.icon(config.icon).classes(f"text-xl text-{config.color}-400")
                ui.label(config.name).classes(
                    "text-sm font-medium " + ("text-white" if active else "text-slate-400")
                )

    @ui.refreshable
    def image_preview() -> None:
        image = store.state.staged_image
        if image is None:
            return
        with ui.row().classes(
            "items-center gap-3 bg-slate-800/80 px-4 py-2 rounded-xl border border-white/10 mb-3"
        ):
            ui.icon("image").classes("text-slate-400")
            with ui.column().classes("gap-0"):
                ui.label(image.filename).classes("text-xs font-medium text-slate-200 truncate max-w-[150px]")
                ui.label("Image attached").classes("text-[10px] text-slate-400")
            ui.button(icon="close", on_click=store.clear_staged_image).props(
                "flat round dense size=sm color=grey"
            )

    @ui.refreshable
    def status_line() -> None:
        ui.label(f"Tutor active • {store.state.active_subject.value}").classes(
            "text-[10px] text-slate-400 font-medium tracking-widest uppercase"
        )

    def sync_send_button(state: SessionState) -> None:
        if state.pending or not state.has_staged_input:
            send_btn.disable()
        else:
            send_btn.enable()

    rendered = {
        "transcript": len(store.state.transcript),
        "pending": store.state.pending,
        "sidebar": store.state.sidebar_open,
        "subject": store.state.active_subject,
        "image": store.state.staged_image,
    }

    def on_state_change(state: SessionState) -> None:
        if len(state.transcript) != rendered["transcript"] or state.pending != rendered["pending"]:
            if not state.pending:
                drop_live_reply()
            rendered["transcript"] = len(state.transcript)
            rendered["pending"] = state.pending
            messages_view.refresh()
            scroll_area.scroll_to(percent=1.0)
        if state.sidebar_open != rendered["sidebar"]:
            rendered["sidebar"] = state.sidebar_open
            drawer.set_value(state.sidebar_open)
        if input_field.value != state.staged_text:
            input_field.value = state.staged_text
        if state.active_subject != rendered["subject"]:
            rendered["subject"] = state.active_subject
            subjects_view.refresh()
            status_line.refresh()
            input_field.props(
                f'placeholder="Ask a question or describe a task in {state.active_subject.value}..."'
            )
        if state.staged_image is not rendered["image"]:
            rendered["image"] = state.staged_image
            image_preview.refresh()
        sync_send_button(state)

    async def handle_upload(e: events.UploadEventArguments) -> None:
        data = await e.file.read()
        store.stage_input(
            store.state.staged_text,
            StagedImage(filename=e.file.name, data=data, content_type=e.file.content_type),
        )
        upload.reset()

    def on_text_change(e: events.ValueChangeEventArguments) -> None:
        text = e.value or ""
        if text != store.state.staged_text:
            store.stage_input(text)

    async def send_message() -> None:
        store.stage_input(input_field.value or "")
        await store.submit()

    def on_drawer_change(e: events.GenericEventArguments) -> None:
        # Closing the overlay on small screens should update the session too.
        if not e.args and store.state.sidebar_open:
            rendered["sidebar"] = False
            store.set_sidebar_open(False)

    # === UI Layout ===
    with ui.left_drawer(value=None).classes("sidebar p-0").props("width=288") as drawer:
        with ui.row().classes("items-center gap-3 p-8 pb-6"):
            with ui.element("div").classes(
                "w-10 h-10 rounded-xl bg-gradient-to-br from-indigo-500 to-violet-600 "
                "flex items-center justify-center"
            ):
                ui.icon("school").classes("text-white text-2xl")
            with ui.column().classes("gap-0"):
                ui.label("Subject Tutor").classes("text-2xl font-bold text-white")
                ui.label("Your homework helper 24/7").classes("text-xs text-slate-400")

        with ui.column().classes("w-full px-6 py-4 gap-2"):
            ui.label("Pick a subject").classes(
                "text-[10px] font-bold text-slate-500 uppercase tracking-widest mb-2"
            )
            subjects_view()

        with ui.element("div").classes("m-6 p-4 rounded-xl border border-white/5 bg-slate-800/50"):
            with ui.row().classes("items-center gap-2 mb-2"):
                ui.icon("auto_awesome").classes("text-amber-400")
                ui.label("Pro Tip").classes("text-sm font-semibold text-slate-200")
            ui.label(
                "Send a photo of the task and get a step-by-step solution. "
                "Don't forget to pick the right subject!"
            ).classes("text-xs text-slate-400 leading-relaxed")

    with ui.column().classes("w-full h-screen gap-0 no-wrap"):
        with ui.row().classes(
            "md:hidden w-full h-16 items-center justify-between px-4 border-b border-white/5"
        ):
            with ui.row().classes("items-center gap-2"):
                ui.icon("school").classes("text-indigo-400 text-2xl")
                ui.label("Subject Tutor").classes("font-bold text-lg text-white")
            ui.button(icon="menu", on_click=store.toggle_sidebar).props("flat round color=grey-4")

        with ui.scroll_area().classes("flex-grow w-full") as scroll_area:
            with ui.column().classes("w-full max-w-4xl mx-auto p-4 md:p-8 gap-2") as messages_container:
                messages_view()

        with ui.column().classes("w-full max-w-4xl mx-auto px-4 pb-6 gap-0"):
            image_preview()
            with ui.row().classes("input-bar w-full items-end gap-2 p-2 no-wrap"):
                upload = (
                    ui.upload(on_upload=handle_upload, auto_upload=True, max_files=1)
                    .props('accept="image/*"')
                    .classes("hidden")
                )
                ui.button(icon="image", on_click=lambda: upload.run_method("pickFiles")).props(
                    "flat round color=grey-5"
                ).tooltip("Upload an image")
                input_field = (
                    ui.textarea(
                        placeholder=f"Ask a question or describe a task in {store.state.active_subject.value}...",
                        on_change=on_text_change,
                    )
                    .props("autogrow borderless dense dark rows=1")
                    .classes("flex-grow text-base")
                    .on("keydown.enter.prevent", send_message)
                )
                send_btn = ui.button(icon="send", on_click=send_message).props(
                    "round unelevated color=indigo"
                )
            with ui.row().classes("w-full justify-center mt-3 opacity-60"):
                status_line()

    drawer.on("update:model-value", on_drawer_change)
    sync_send_button(store.state)
    store.subscribe(on_state_change)


def main() -> None:
    ui.run(title="Subject Tutor", port=8080, reload=False, dark=True)


if __name__ in {"__main__", "__mp_main__"}:
    main()
