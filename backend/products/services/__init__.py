"""
Product services.

- RecipeStore: recipe reads as component values, recipe replacement
- BOMExpander: recursive bill-of-materials flattening
"""
from products.services.bom_service import BillOfMaterials, BOMExpander
from products.services.recipe_store import (
    IngredientComponent,
    ProductStockInfo,
    RecipeComponent,
    RecipeStore,
    SubProductComponent,
)

__all__ = [
    'BillOfMaterials',
    'BOMExpander',
    'IngredientComponent',
    'ProductStockInfo',
    'RecipeComponent',
    'RecipeStore',
    'SubProductComponent',
]
