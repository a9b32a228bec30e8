"""
import_engine.lookups - Get-or-create resolvers, name → id.

Each lookup owns a cache that is valid for ONE import run only.
MasterProcessor builds fresh instances per run; reuse an instance
across runs only after reset_cache().
"""

from import_engine.lookups.attribute import AttributeLookup      # noqa: F401
from import_engine.lookups.brand import BrandLookup              # noqa: F401
from import_engine.lookups.category import CategoryLookup        # noqa: F401
from import_engine.lookups.concern import ConcernLookup          # noqa: F401
from import_engine.lookups.tag import TagLookup                  # noqa: F401
