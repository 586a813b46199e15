# ecommerce/services/cart_service.py
import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud
from ..errors import BadRequestError, InsufficientStockError, NotFoundError
from ..models import Cart, CartItem
from ..schemas import AddToCartIn, CartItemOut, CartOut, UpdateCartItemIn

logger = logging.getLogger(__name__)


def _item_out(item: CartItem) -> CartItemOut:
    price = float(item.price_at_add_time or 0)
    return CartItemOut(
        id=item.id,
        cart_id=item.cart_id,
        product_id=item.product_id,
        quantity=item.quantity,
        price_at_add_time=price,
        product_name=item.product.name if item.product else None,
        product_image_url=item.product.image_url if item.product else None,
        total_price=round(price * item.quantity, 2),
    )


def to_cart_out(cart: Cart) -> CartOut:
    items = [_item_out(i) for i in cart.items if not i.is_deleted]
    return CartOut(
        id=cart.id,
        user_id=cart.user_id,
        cart_items=items,
        total_price=round(sum(i.total_price for i in items), 2),
        total_items=sum(i.quantity for i in items),
        created_at=cart.created_at,
        updated_at=cart.updated_at,
    )


def empty_cart(user_id: int) -> CartOut:
    now = datetime.now(timezone.utc)
    return CartOut(user_id=user_id, created_at=now, updated_at=now)


def _check_quantity(quantity: int):
    if quantity <= 0:
        raise BadRequestError("Quantity must be greater than 0")


def _check_stock(stock, quantity: int):
    available = stock or 0
    if available < quantity:
        raise InsufficientStockError(available)


async def _reload(db: AsyncSession, user_id: int) -> CartOut:
    cart = await crud.get_cart_with_items(db, user_id)
    return to_cart_out(cart) if cart else empty_cart(user_id)


async def get_cart(db: AsyncSession, user_id: int) -> CartOut:
    return await _reload(db, user_id)


async def add_to_cart(db: AsyncSession, user_id: int, payload: AddToCartIn) -> CartOut:
    _check_quantity(payload.quantity)

    cart = await crud.get_or_create_cart(db, user_id)
    product = await crud.get_product(db, payload.product_id)
    if product is None:
        raise NotFoundError("Product not found")
    _check_stock(product.stock, payload.quantity)

    item = await crud.get_cart_item_for_product(db, cart.id, product.id)
    if item is not None:
        item.quantity += payload.quantity
    else:
        db.add(CartItem(
            cart_id=cart.id,
            product_id=product.id,
            quantity=payload.quantity,
            price_at_add_time=product.price or 0,
        ))
    crud.touch_cart(cart)
    await db.commit()
    logger.info("User %s added %d x product %s to cart %s", user_id, payload.quantity, product.id, cart.id)
    return await _reload(db, user_id)


async def update_cart_item(db: AsyncSession, user_id: int, payload: UpdateCartItemIn) -> CartOut:
    _check_quantity(payload.quantity)

    cart = await crud.get_cart(db, user_id)
    if cart is None:
        raise NotFoundError("Cart not found")
    item = await crud.get_cart_item(db, cart.id, payload.cart_item_id)
    if item is None:
        raise NotFoundError("Cart item not found")

    product = await crud.get_product(db, item.product_id, include_deleted=True)
    if product is not None:
        _check_stock(product.stock, payload.quantity)

    item.quantity = payload.quantity
    crud.touch_cart(cart)
    await db.commit()
    return await _reload(db, user_id)


async def remove_cart_item(db: AsyncSession, user_id: int, cart_item_id: int) -> CartOut:
    cart = await crud.get_cart(db, user_id)
    item = await crud.get_cart_item(db, cart.id, cart_item_id) if cart else None
    if item is None:
        raise NotFoundError("Failed to remove cart item")

    item.is_deleted = True
    crud.touch_cart(cart)
    await db.commit()
    return await _reload(db, user_id)


async def clear_cart(db: AsyncSession, user_id: int) -> CartOut:
    cart = await crud.get_cart(db, user_id)
    if cart is None:
        raise NotFoundError("Failed to clear cart")

    for item in await crud.get_active_cart_items(db, cart.id):
        item.is_deleted = True
    crud.touch_cart(cart)
    await db.commit()
    return empty_cart(user_id)


async def cart_item_count(db: AsyncSession, user_id: int) -> int:
    cart = await crud.get_cart_with_items(db, user_id)
    if cart is None:
        return 0
    return sum(i.quantity for i in cart.items if not i.is_deleted)
