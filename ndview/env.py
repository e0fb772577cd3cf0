import os

DEBUG = int(os.getenv("DEBUG", "0"))
GRAPH = int(os.getenv("GRAPH", "0"))
BOUNDS_CHECK = int(os.getenv("BOUNDS_CHECK", "1"))
BORROW_CHECK = int(os.getenv("BORROW_CHECK", "1"))
BACKEND = os.getenv("BACKEND", "cpu")

assert BACKEND in ("cpu",), f"backend {BACKEND} not supported!"
