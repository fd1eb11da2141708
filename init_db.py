import sys
from datetime import timedelta
from decimal import Decimal

from dimerr.database import SessionLocal, engine
from dimerr.models import Base, Brand, Campaign, Customer, Order, Product, PaymentType
from dimerr.crud import orders as crud_orders
from dimerr.schemas.orders import OrderCreate
from dimerr.security import create_access_token
from dimerr.utils.ledger import seller_today

DEMO_SELLER = "demo-seller"


def init_db(seller_id: str = DEMO_SELLER):
    print("--- Creating tables ---")
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    print("--- Seeding ---")

    # 1. BRANDS
    brands_data = [("Personal Collection", 25), ("Avon", 30), ("Natasha", None)]
    brand_map = {}
    for name, margin in brands_data:
        brand = db.query(Brand).filter(Brand.seller_id == seller_id, Brand.name == name).first()
        if not brand:
            brand = Brand(
                seller_id=seller_id,
                name=name,
                default_margin_percent=Decimal(margin) if margin is not None else None,
            )
            db.add(brand)
            db.flush()
        brand_map[name] = brand
    db.commit()
    print("Brands ready.")

    # 2. CAMPAIGNS
    today = seller_today()
    for brand in brand_map.values():
        name = f"{brand.name} Brochure {today:%B %Y}"
        if not db.query(Campaign).filter(Campaign.seller_id == seller_id, Campaign.name == name).first():
            db.add(Campaign(
                seller_id=seller_id,
                brand_id=brand.id,
                name=name,
                start_date=today.replace(day=1),
                end_date=today.replace(day=1) + timedelta(days=27),
            ))
    db.commit()
    print("Campaigns ready.")

    # 3. CUSTOMERS
    customers_data = [
        ("Aling Nena", "0917 123 4567", "Sari-sari store, pays on 15th and 30th"),
        ("Marites Santos", "0918 765 4321", None),
        ("Joy Dela Cruz", None, "Office mate"),
    ]
    customer_map = {}
    for name, phone, notes in customers_data:
        customer = db.query(Customer).filter(Customer.seller_id == seller_id, Customer.name == name).first()
        if not customer:
            customer = Customer(seller_id=seller_id, name=name, phone=phone, notes=notes)
            db.add(customer)
            db.flush()
        customer_map[name] = customer
    db.commit()
    print("Customers ready.")

    # 4. PRODUCTS
    products_data = [
        ("Personal Collection", "Bench Daily Scent", "Cologne", "Atlantis", "75ml", "Fragrance"),
        ("Personal Collection", "Ph Care", "Feminine Wash", "Cool Wind", "250ml", "Personal care"),
        ("Avon", "Far Away", "Eau de Parfum", None, "50ml", "Fragrance"),
        ("Avon", "Simply Pretty", "Lipstick", "Rose Pink", None, "Make-up"),
        ("Natasha", "Leather Sling Bag", "Bag", "Black", None, "Accessories"),
    ]
    product_map = {}
    for brand_name, name, ptype, variant, volume, category in products_data:
        brand = brand_map[brand_name]
        product = db.query(Product).filter(
            Product.seller_id == seller_id,
            Product.name == name,
            Product.brand_id == brand.id,
        ).first()
        if not product:
            product = Product(
                seller_id=seller_id,
                brand_id=brand.id,
                name=name,
                type=ptype,
                variant_name=variant,
                volume=volume,
                category=category,
            )
            db.add(product)
            db.flush()
        product_map[name] = product
    db.commit()
    print("Products ready.")

    # 5. SAMPLE ORDERS (only on an empty ledger)
    if not db.query(Order).filter(Order.seller_id == seller_id).first():
        samples = [
            ("Aling Nena", "Personal Collection", PaymentType.CASH, None, [("Bench Daily Scent", 2, "150")]),
            ("Marites Santos", "Avon", PaymentType.CREDIT, today + timedelta(days=7), [("Far Away", 1, "500")]),
            ("Joy Dela Cruz", "Avon", PaymentType.CREDIT, today - timedelta(days=2), [("Simply Pretty", 3, "199")]),
        ]
        for customer_name, brand_name, ptype, due, items in samples:
            brand = brand_map[brand_name]
            order_in = OrderCreate(
                customer_id=customer_map[customer_name].id,
                brand_id=brand.id,
                order_date=today,
                payment_type=ptype.value,
                due_date=due,
                items=[
                    {"product_id": product_map[p].id, "quantity": qty, "srp_each": srp}
                    for p, qty, srp in items
                ],
            )
            lines = crud_orders.checked_lines(order_in, brand)
            crud_orders.create_order(db, order_in, lines, seller_id)
        print(f"{len(samples)} sample orders created.")

    db.close()

    print("--- SEED DONE ---")
    print(f"Bearer token for '{seller_id}':")
    print(create_access_token(seller_id))


if __name__ == "__main__":
    init_db(sys.argv[1] if len(sys.argv) > 1 else DEMO_SELLER)
