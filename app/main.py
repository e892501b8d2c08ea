from __future__ import annotations

import base64
import html
from typing import Callable

import streamlit as st

from src.adapters.page_renderer import PageRenderer
from src.adapters.pymupdf_adapter import PyMuPdfAdapter
from src.domain.models import (
    MergeProgress,
    Page,
    ProgressStatus,
    SourceDocument,
    UploadBatchResult,
)
from src.infrastructure.config import AppConfig
from src.infrastructure.logging_config import configure_logging
from src.services.output_naming import format_file_size
from src.services.workspace_service import WorkspaceService


def _init_state(config: AppConfig) -> None:
    if "workspace" not in st.session_state:
        adapter = PyMuPdfAdapter()
        workspace = WorkspaceService(adapter, config)
        st.session_state.workspace = workspace
        st.session_state.renderer = PageRenderer(
            adapter, workspace.registry, width=config.thumbnail_width
        )
    st.session_state.setdefault("merged_pdf_bytes", b"")
    st.session_state.setdefault("merged_pdf_name", config.default_output_name)
    st.session_state.setdefault("upload_token", 0)


def _thumbnail_html(image_bytes: bytes, label: str, selected: bool) -> str:
    encoded = base64.b64encode(image_bytes).decode("ascii")
    safe_label = html.escape(label)
    border = "2px solid #2563eb" if selected else "1px solid rgba(120,120,120,0.35)"
    return (
        f"<div style='border:{border};"
        " border-radius:10px;padding:8px;background:rgba(250,250,250,0.75);'>"
        "<div style='text-align:center;font-size:0.8rem;"
        f"font-weight:600;margin-bottom:6px;'>{safe_label}</div>"
        "<div style='display:flex;justify-content:center;'>"
        f"<img src='data:image/png;base64,{encoded}' "
        "style='width:100%;height:auto;border-radius:6px;'/>"
        "</div>"
        "</div>"
    )


def _progress_bar_listener(progress_bar) -> Callable[[MergeProgress], None]:
    def _update(state: MergeProgress) -> None:
        progress_bar.progress(state.percent, text=state.message or None)

    return _update


def _auto_thumbnail_columns(page_count: int) -> int:
    if page_count <= 1:
        return 1
    if page_count <= 4:
        return 2
    if page_count <= 9:
        return 3
    if page_count <= 16:
        return 4
    return 5


def _render_upload_result(result: UploadBatchResult) -> None:
    if result.accepted:
        st.success(f"Loaded {result.accepted_count} PDF(s).")
    if result.rejected:
        st.warning("Some files were rejected:")
        st.dataframe(
            [{"File": item.name, "Reason": item.reason} for item in result.rejected],
            use_container_width=True,
        )


def _upload_section(config: AppConfig, workspace: WorkspaceService) -> None:
    uploaded = st.file_uploader(
        (
            "Load one or more PDFs "
            f"(max {config.max_pdf_size_mb} MB each, up to {config.max_documents} files)"
        ),
        type=["pdf"],
        accept_multiple_files=True,
        key=f"workspace_upload_{st.session_state.upload_token}",
    )

    col_add, col_reset = st.columns([1, 1])
    with col_add:
        if st.button("Add Uploaded PDFs", type="primary", use_container_width=True):
            files = [(item.name, item.getvalue()) for item in uploaded] if uploaded else []
            if not files:
                st.warning("Upload at least one PDF.")
            else:
                _render_upload_result(workspace.add_documents(files))
                st.session_state.upload_token += 1
    with col_reset:
        if st.button("New (Reset Workspace)", use_container_width=True):
            try:
                workspace.reset()
                st.session_state.renderer.clear()
                st.session_state.merged_pdf_bytes = b""
                st.success("Workspace reset.")
            except Exception as exc:
                st.error(str(exc))


def _document_list(workspace: WorkspaceService, renderer: PageRenderer) -> None:
    documents: tuple[SourceDocument, ...] = workspace.documents
    for document in documents:
        retained = len(workspace.page_index.pages_for_document(document.document_id))
        info_col, action_col = st.columns([4, 1])
        with info_col:
            st.markdown(
                f"**{document.name}** ({format_file_size(document.size_bytes)}, "
                f"{retained} of {document.page_count} pages retained)"
            )
        with action_col:
            if st.button("Remove PDF", key=f"remove_pdf_{document.document_id}"):
                workspace.remove_document(document.document_id)
                renderer.evict(document.document_id)
                st.rerun()


def _page_label(page: Page, names: dict[str, str], position: int) -> str:
    name = names.get(page.source_document_id, "?")
    return f"{position + 1}. {name} p.{page.source_page_number}"


def _page_grid(workspace: WorkspaceService, renderer: PageRenderer) -> None:
    pages = workspace.pages
    names = {item.document_id: item.name for item in workspace.documents}
    selected = workspace.selected

    header_col, delete_col = st.columns([3, 1])
    with header_col:
        st.caption(f"{len(pages)} page(s) in output order, {len(selected)} selected")
    with delete_col:
        if st.button(
            f"Delete Selected ({len(selected)})",
            disabled=not selected,
            use_container_width=True,
        ):
            workspace.delete_selected()
            st.rerun()

    per_row = _auto_thumbnail_columns(len(pages))
    cols = st.columns(per_row, gap="small")
    for position, page in enumerate(pages):
        with cols[position % per_row]:
            thumbnail = renderer.request_thumbnail(
                page.source_document_id, page.source_page_number
            )
            st.markdown(
                _thumbnail_html(
                    thumbnail,
                    _page_label(page, names, position),
                    page.page_id in selected,
                ),
                unsafe_allow_html=True,
            )
            checked = st.checkbox(
                "Select",
                value=page.page_id in selected,
                key=f"select_{page.page_id}",
            )
            if checked != (page.page_id in selected):
                workspace.toggle_select(page.page_id)
                st.rerun()

            left_col, right_col, delete_page_col = st.columns(3)
            with left_col:
                if st.button("◀", key=f"left_{page.page_id}", disabled=position == 0):
                    workspace.reorder(page.page_id, position - 1)
                    st.rerun()
            with right_col:
                if st.button(
                    "▶", key=f"right_{page.page_id}", disabled=position == len(pages) - 1
                ):
                    workspace.reorder(page.page_id, position + 1)
                    st.rerun()
            with delete_page_col:
                if st.button("✕", key=f"delete_{page.page_id}"):
                    workspace.delete_one(page.page_id)
                    st.rerun()

            target = st.number_input(
                "Move to",
                min_value=1,
                max_value=len(pages),
                value=position + 1,
                step=1,
                key=f"move_{page.page_id}_{position}",
            )
            if int(target) != position + 1:
                workspace.reorder(page.page_id, int(target) - 1)
                st.rerun()


def _merge_section(config: AppConfig, workspace: WorkspaceService) -> None:
    output_name = st.text_input("Output file name", value=config.default_output_name)
    if st.button(
        f"Merge {len(workspace.pages)} Page(s)",
        type="primary",
        disabled=not workspace.pages,
        use_container_width=True,
    ):
        listener = _progress_bar_listener(st.progress(0))
        workspace.progress_tracker.subscribe(listener)
        try:
            result = workspace.merge(output_name=output_name)
            st.session_state.merged_pdf_bytes = result.output_pdf
            st.session_state.merged_pdf_name = result.output_name
        except Exception as exc:
            st.error(str(exc))
        finally:
            workspace.progress_tracker.unsubscribe(listener)

    state = workspace.progress
    if state.status == ProgressStatus.COMPLETE:
        st.success(state.message)
    elif state.status == ProgressStatus.ERROR:
        st.error(state.message)

    if st.session_state.merged_pdf_bytes:
        st.download_button(
            "Download Merged PDF",
            data=st.session_state.merged_pdf_bytes,
            file_name=st.session_state.merged_pdf_name,
            mime="application/pdf",
            use_container_width=True,
        )


def main() -> None:
    config = AppConfig()
    configure_logging(config.log_level)
    st.set_page_config(page_title="PDF Page Assembler", layout="wide")
    st.title("PDF Page Assembler", anchor=False)
    st.caption("Upload PDFs, reorder or delete pages, then merge them into one document.")

    _init_state(config)
    workspace: WorkspaceService = st.session_state.workspace
    renderer: PageRenderer = st.session_state.renderer

    _upload_section(config, workspace)

    if not workspace.documents:
        st.info("No PDFs loaded yet.")
        return

    st.subheader("Documents", anchor=False)
    _document_list(workspace, renderer)
    st.divider()

    st.subheader("Preview & Edit Pages", anchor=False)
    if workspace.pages:
        _page_grid(workspace, renderer)
    else:
        st.caption("No pages remain. Upload more PDFs or reset the workspace.")
    st.divider()

    _merge_section(config, workspace)


if __name__ == "__main__":
    main()
