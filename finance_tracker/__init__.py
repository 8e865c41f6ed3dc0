"""Top‑level package for the Finance Tracker.

This file makes the directory a Python package and exposes
convenient names.  The primary modules are:

* ``db`` – SQLite store for users, transactions and custom categories
* ``auth`` – local sign-up/sign-in and profile metadata
* ``filters`` – category and date-range filtering
* ``analytics`` – totals, category breakdowns and monthly series
* ``visualization`` – functions that generate Plotly figures

To run the app from the command line you can execute:

```bash
python run_dashboard.py
```

which launches Streamlit with ``finance_tracker/Home.py`` as the entry
page so the views in ``pages/`` are discovered automatically.
"""

from . import analytics  # noqa: F401  # re-exported for convenience
from . import filters  # noqa: F401  # re-exported for convenience
from . import visualization  # noqa: F401  # re-exported for convenience

__version__ = "0.1.0"

__all__ = ["analytics", "filters", "visualization"]
