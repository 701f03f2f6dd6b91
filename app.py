"""Development entrypoint: `python app.py` (or `flask --app app run`)."""

import sys
from pathlib import Path

SRC = Path(__file__).resolve().parent / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from ulsconnect.main import create_app  # noqa: E402

app = create_app()


if __name__ == "__main__":
    app.run(debug=app.config["DEBUG"])
