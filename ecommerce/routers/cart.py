# ecommerce/routers/cart.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_db
from ..deps import CurrentUser, get_current_user
from ..schemas import AddToCartIn, ApiResponse, CartOut, UpdateCartItemIn
from ..services import cart_service

router = APIRouter(prefix="/api/Cart", tags=["cart"])


@router.get("/GetCart", response_model=ApiResponse[CartOut])
async def get_cart(user: CurrentUser = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    cart = await cart_service.get_cart(db, user.id)
    return ApiResponse[CartOut](message="Cart retrieved successfully", data=cart)


@router.post("/AddToCart", response_model=ApiResponse[CartOut])
async def add_to_cart(
    payload: AddToCartIn,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    cart = await cart_service.add_to_cart(db, user.id, payload)
    return ApiResponse[CartOut](message="Product added to cart successfully", data=cart)


@router.put("/UpdateCartItem", response_model=ApiResponse[CartOut])
async def update_cart_item(
    payload: UpdateCartItemIn,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    cart = await cart_service.update_cart_item(db, user.id, payload)
    return ApiResponse[CartOut](message="Cart item updated successfully", data=cart)


@router.delete("/RemoveCartItem/{cart_item_id}", response_model=ApiResponse[CartOut])
async def remove_cart_item(
    cart_item_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    cart = await cart_service.remove_cart_item(db, user.id, cart_item_id)
    return ApiResponse[CartOut](message="Cart item removed successfully", data=cart)


@router.delete("/ClearCart", response_model=ApiResponse[CartOut])
async def clear_cart(user: CurrentUser = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    cart = await cart_service.clear_cart(db, user.id)
    return ApiResponse[CartOut](message="Cart cleared successfully", data=cart)


@router.get("/CartItemCount", response_model=ApiResponse[int])
async def cart_item_count(user: CurrentUser = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    count = await cart_service.cart_item_count(db, user.id)
    return ApiResponse[int](message="Cart item count retrieved successfully", data=count)
