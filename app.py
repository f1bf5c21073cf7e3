import logging

import gradio as gr

from json_shape_loader.config import KEEP, LENIENT, METADATA_CONFLICT_RULES, MALFORMED_LINE_POLICIES, OVERWRITE, STRICT
from json_shape_loader.handlers import (
    export_data_handler,
    handle_root_change,
    load_uploaded_file,
    preview_handler,
)
from json_shape_loader.paths import ROOT

# --- UI Definition ---
with gr.Blocks(title="JSON Shape Loader") as demo:
    gr.Markdown("# JSON Shape Loader")
    gr.Markdown(
        "Upload a JSON Lines file, a bare JSON array or a wrapped JSON object, "
        "and turn its records into a table."
    )

    # State
    source_path_state = gr.State()

    with gr.Row():
        # Left Panel: Input & Record Location
        with gr.Column(scale=1):
            gr.Markdown("### 1. Import")
            file_input = gr.File(label="Upload JSON File", file_types=[".json", ".jsonl", ".ndjson"])
            status_msg = gr.Textbox(label="Status", interactive=False)

            gr.Markdown("### 2. Locate Records")
            root_path_selector = gr.Dropdown(
                label="Record Path (wrapped objects only)",
                choices=[ROOT],
                value=ROOT,
                allow_custom_value=True,
                interactive=True,
            )
            metadata_selector = gr.Dropdown(
                label="Metadata Keys (copied onto every record)",
                choices=[],
                value=[],
                multiselect=True,
                interactive=True,
            )
            conflict_rule = gr.Radio(
                choices=list(METADATA_CONFLICT_RULES),
                value=OVERWRITE,
                label="When a metadata key is also a record field",
                info=f"'{OVERWRITE}' replaces the record's value, '{KEEP}' leaves it.",
            )
            malformed_policy = gr.Radio(
                choices=list(MALFORMED_LINE_POLICIES),
                value=STRICT,
                label="Malformed lines (JSON Lines only)",
                info=f"'{STRICT}' stops at the first bad line, '{LENIENT}' skips and counts them.",
            )

        # Right Panel: Output Builder
        with gr.Column(scale=1):
            gr.Markdown("### 3. Export")
            output_format = gr.Radio(choices=["CSV", "JSON"], value="CSV", label="Output Format")
            output_filename = gr.Textbox(label="Output Filename (optional)", placeholder="output")
            document_count = gr.Textbox(label="Document Count", interactive=False)
            load_preview_btn = gr.Button("Load Preview")
            export_btn = gr.Button("Export Data", variant="primary")
            download_output = gr.File(label="Download Result")
            preview = gr.JSON(label="Preview (first 3 rows)")

    option_inputs = [source_path_state, root_path_selector, metadata_selector, malformed_policy, conflict_rule]

    file_input.upload(
        fn=load_uploaded_file,
        inputs=[file_input],
        outputs=[source_path_state, root_path_selector, metadata_selector, status_msg, preview, document_count],
    )

    for control in (root_path_selector, metadata_selector, malformed_policy, conflict_rule):
        control.change(
            fn=handle_root_change,
            inputs=option_inputs,
            outputs=[document_count, preview],
        )

    load_preview_btn.click(
        fn=preview_handler,
        inputs=option_inputs,
        outputs=[preview, status_msg],
    )

    export_btn.click(
        fn=export_data_handler,
        inputs=option_inputs + [output_format, output_filename],
        outputs=[download_output, status_msg],
    )

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    demo.launch()
