import os
import tempfile
from pathlib import Path

# Must run before campus_bracket is imported, the config is read at import time.
_TEST_DB_PATH = Path(tempfile.mkdtemp(prefix="campus-bracket-")) / "ci.db"
os.environ["ENVIRONMENT"] = "CI"
os.environ["DB_DSN"] = f"sqlite:///{_TEST_DB_PATH}"
