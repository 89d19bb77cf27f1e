"""Some custom helper types to make typehints and typechecking easier.

For user facing type declarations, please see `meerkatmap.utils.datatype_helper`.
"""
from typing import TYPE_CHECKING, Any

import pandas as pd

_DataFrame = Any if TYPE_CHECKING else pd.DataFrame
