import os
import tempfile

# Keep progress state written during tests out of the working tree.
os.environ.setdefault(
    "PROGRESS_STATE_FILE",
    os.path.join(tempfile.mkdtemp(prefix="ms-progress-"), "state.json"),
)
