"""components — Plain data records shared by the engine and the UI.

Submodules
----------
item           Item (live placement state of one packable thing)
item_registry  ItemRegistry (catalogue of item definitions)

All public names are re-exported here so code can do
``from components import Item``.
"""

from components.item import Item
from components.item_registry import ItemRegistry

__all__ = ["Item", "ItemRegistry"]
