# Web Layer
# =========
# FastAPI app exposing the pipeline as JSON. Served by main.py via uvicorn.
