import os
import sys

# Make the `owm` package importable when the tests run from a source checkout
# without an editable install.
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
