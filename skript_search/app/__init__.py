"""Application layer: corpus ownership, search services and the Gradio UI."""
