import logging
import random
import re
from datetime import datetime
from faker import Faker
from sqlalchemy import delete
from sqlalchemy.orm import Session
from core.database import SessionLocal, Base, engine
from core.security import AdminContext
from models.product import Product, ProductCategory
from models.student import Student
from models.student_pin import StudentPIN
from schemas.pin_schema import PINRangeCreateRequest
from schemas.product_schema import ProductCreateRequest
from schemas.student_schema import StudentRegistrationRequest
from services.pin_allocation_service import PINAllocationService
from services.product_service import ProductService
from services.registration_service import RegistrationService

logger = logging.getLogger(__name__)

PIN_SCOPES = [
    ("CME", 1, "A"),
    ("CME", 2, "B"),
    ("ECE", 1, "A"),
    ("EEE", 3, "A"),
    ("AIML", 1, "A"),
]

PINS_PER_SECTION = 20

LISTING_TITLES = {
    ProductCategory.BOOKS: [
        "Engineering Mathematics Vol 1", "Basic Electrical Engineering", "C Programming Notes",
        "Digital Electronics Textbook", "Engineering Drawing Guide",
    ],
    ProductCategory.STATIONARY: [
        "Drafter Set", "Scientific Calculator Cover", "Lab Record Book", "Mini Drafter",
    ],
    ProductCategory.ELECTRONICS: [
        "Casio fx-991ES Calculator", "Arduino Uno Kit", "Multimeter", "Breadboard Set",
    ],
    ProductCategory.OTHERS: [
        "Lab Coat (M)", "Bicycle", "Hostel Bucket", "Cricket Bat",
    ],
}

fake = Faker("en_IN")


def make_mobile(index: int) -> str:
    prefixes = ["9", "8", "7", "6"]
    prefix = prefixes[index % len(prefixes)]
    rest = f"{index:09d}"[-9:]
    return f"{prefix}{rest}"


def make_email(name: str, index: int) -> str:
    base = re.sub(r"[^a-z]+", ".", name.lower()).strip(".") or "student"
    return f"{base}.{index}@students.campus.edu"


def clear(db: Session) -> None:
    db.execute(delete(Product))
    db.execute(delete(Student))
    db.execute(delete(StudentPIN))
    db.commit()


def seed(db: Session, students_per_scope: int = 3, listings_per_student: int = 2, seed_value: int = 42) -> dict:
    random.seed(seed_value)
    Faker.seed(seed_value)
    admin = AdminContext(admin_name="seeder")
    joining_year = datetime.now().year

    pins_created = 0
    for branch, year, section in PIN_SCOPES:
        result = PINAllocationService.create_range(db, admin, PINRangeCreateRequest(
            joining_year=joining_year - (year - 1),
            branch=branch,
            year=year,
            section=section,
            start_sequence=1,
            end_sequence=PINS_PER_SECTION,
        ))
        if not result.success:
            raise RuntimeError(f"Seeding PINs for {branch}-{year}{section} failed: {result.error}")
        pins_created += result.count

    students_created = 0
    listings_created = 0
    index = 0
    for branch, year, section in PIN_SCOPES:
        available = PINAllocationService.available_pins(
            db, joining_year - (year - 1), branch, year, section
        ).data
        for pin in random.sample(available, min(students_per_scope, len(available))):
            index += 1
            name = fake.name()
            registration = RegistrationService.register_student(db, StudentRegistrationRequest(
                pin_number=pin.pin_number,
                full_name=name,
                email=make_email(name, index),
                phone_number=make_mobile(index),
            ))
            if not registration.success:
                raise RuntimeError(f"Registering {pin.pin_number} failed: {registration.error}")
            student = RegistrationService.confirm_email(db, registration.data.id).data
            students_created += 1

            for _ in range(listings_per_student):
                category = random.choice(list(ProductCategory))
                product = ProductService.create_product(db, ProductCreateRequest(
                    seller_id=student.id,
                    title=random.choice(LISTING_TITLES[category]),
                    description=fake.sentence(nb_words=12),
                    price=random.choice([0, 50, 150, 450, 800, 2500, 6000]),
                    category=category,
                    branch=random.choice([None, student.branch]),
                    image_urls=[fake.image_url()],
                ))
                if not product.success:
                    raise RuntimeError(f"Creating listing for {student.id} failed: {product.error}")
                listings_created += 1

    summary = {"pins": pins_created, "students": students_created, "products": listings_created}
    logger.info(f"Seeded {summary}")
    return summary


if __name__ == "__main__":
    logging.basicConfig( level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    Base.metadata.create_all(bind=engine, checkfirst=True)
    db = SessionLocal()
    try:
        print("Clearing existing seed data...")
        clear(db)
        print("Cleared.")
        print(seed(db))
    except Exception as e:
        db.rollback()
        print(f"\nERROR: {e}")
        raise
    finally:
        db.close()
