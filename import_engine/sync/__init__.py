"""
import_engine.sync - Per-entity writers used by the master import.

Every writer takes the run's Session as its first argument and never
commits; MasterProcessor owns the transaction.
"""

from import_engine.sync.concern_syncer import ProductConcernSyncer          # noqa: F401
from import_engine.sync.media_syncer import ProductMediaSyncer              # noqa: F401
from import_engine.sync.online_ensurer import ProductOnlineEnsurer          # noqa: F401
from import_engine.sync.product_upserter import ProductUpserter             # noqa: F401
from import_engine.sync.tag_syncer import ProductTagSyncer                  # noqa: F401
from import_engine.sync.variant_attribute_syncer import VariantAttributeSyncer  # noqa: F401
from import_engine.sync.variant_upserter import VariantUpserter             # noqa: F401
