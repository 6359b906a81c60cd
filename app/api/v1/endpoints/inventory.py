"""
Inventory API endpoints for managing products and stock levels.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field

from app.core.exceptions import RetailPOSError
from app.services.inventory_monitor import InventoryMonitor
from app.services.shop_state import ShopState, get_shop_state

router = APIRouter()


def get_inventory_monitor(state: ShopState = Depends(get_shop_state)) -> InventoryMonitor:
    return InventoryMonitor(state)


class ProductRequest(BaseModel):
    """Request model for adding a product."""
    code: str = Field(..., description="Product code (stored upper-case)")
    name: str = Field(..., description="Product name")
    price: float = Field(..., description="Unit price in ₹")
    stock: int = Field(0, description="Units in stock")


class ProductUpdateRequest(BaseModel):
    """Request model for updating a product."""
    name: str = Field(..., description="Product name")
    price: float = Field(..., description="Unit price in ₹")
    stock: int = Field(..., description="Units in stock")


@router.get("/products")
async def list_products(
    search: Optional[str] = None,
    inventory_monitor: InventoryMonitor = Depends(get_inventory_monitor)
):
    """
    List products in the catalogue.

    The optional search term matches product names and codes, ignoring case.
    """
    try:
        products = await inventory_monitor.list_products(search)
        return {
            "products": products,
            "count": len(products)
        }
    except RetailPOSError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to list products: {str(e)}")


@router.post("/products", status_code=201)
async def add_product(
    product: ProductRequest,
    inventory_monitor: InventoryMonitor = Depends(get_inventory_monitor)
):
    """Add a new product to the catalogue."""
    try:
        return await inventory_monitor.add_product(product.model_dump())
    except RetailPOSError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to add product: {str(e)}")


@router.get("/products/{code}")
async def get_product(
    code: str,
    inventory_monitor: InventoryMonitor = Depends(get_inventory_monitor)
):
    try:
        product = await inventory_monitor.get_product(code)
        return {**product.model_dump(), "status": product.stock_status.value}
    except RetailPOSError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get product: {str(e)}")


@router.put("/products/{code}")
async def update_product(
    code: str,
    product: ProductUpdateRequest,
    inventory_monitor: InventoryMonitor = Depends(get_inventory_monitor)
):
    """Update a product's name, price and stock."""
    try:
        return await inventory_monitor.update_product(code, product.model_dump())
    except RetailPOSError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update product: {str(e)}")


@router.delete("/products/{code}", status_code=204)
async def delete_product(
    code: str,
    inventory_monitor: InventoryMonitor = Depends(get_inventory_monitor)
):
    """Remove a product from the catalogue."""
    try:
        await inventory_monitor.delete_product(code)
        return Response(status_code=204)
    except RetailPOSError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to delete product: {str(e)}")


@router.get("/status")
async def get_inventory_status(
    inventory_monitor: InventoryMonitor = Depends(get_inventory_monitor)
):
    """Get stock status (in stock, low stock, out of stock) for every product."""
    try:
        return await inventory_monitor.get_inventory_status()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get inventory status: {str(e)}")


@router.get("/low-stock")
async def get_low_stock_products(
    threshold: Optional[int] = None,
    inventory_monitor: InventoryMonitor = Depends(get_inventory_monitor)
):
    """
    Get products with low stock levels.

    Returns products that are running low on stock and may need restocking.
    """
    try:
        low_stock_products = await inventory_monitor.get_low_stock_products(threshold)
        return {
            "products": low_stock_products,
            "count": len(low_stock_products)
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get low stock products: {str(e)}")
