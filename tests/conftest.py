import os
import tempfile
from pathlib import Path

# Settings are read when stageflow.config is first imported, so these must be set before that.
os.environ["ENVIRONMENT"] = "CI"
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{Path(tempfile.mkdtemp(prefix='stageflow-')) / 'stageflow_test.db'}",
)
