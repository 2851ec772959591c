# workforce/seed.py
# Creates or refreshes the bootstrap ADMIN account. Safe to run repeatedly.
import logging
from typing import Optional

from workforce.core import security
from workforce.core.config import Settings, settings as default_settings
from workforce.core.enums import EmployeeStatus, Role
from workforce.db.gateway import Gateway
from workforce.db.models import Employee, User
from workforce.db.session import Database

logger = logging.getLogger(__name__)

ADMIN_SAP_ID = "SAP-0001"


def seed_admin(gateway: Gateway, email: str, password: str) -> User:
    """ Upserts the admin user by email and its employee profile by SAP id. """
    with gateway.transaction():
        user = gateway.find_one(User, email=email)
        hashed_password = security.get_password_hash(password)
        if user is None:
            user = gateway.create(
                User, email=email, name="System Administrator", hashed_password=hashed_password, role=Role.ADMIN.value
            )
            logger.info("Created admin user %s", email)
        else:
            gateway.update(user, {"hashed_password": hashed_password, "role": Role.ADMIN.value})
            logger.info("Updated admin user %s", email)

        employee = gateway.find_one(Employee, sap_id=ADMIN_SAP_ID)
        profile = {
            "name": user.name or "System Administrator",
            "email": email,
            "department": "Administration",
            "position": "Administrator",
            "role": Role.ADMIN.value,
            "status": EmployeeStatus.ACTIVE.value,
            "user": user,
        }
        if employee is None:
            gateway.create(Employee, sap_id=ADMIN_SAP_ID, **profile)
        else:
            gateway.update(employee, profile)
    return user


def main(settings: Optional[Settings] = None) -> None:
    settings = settings or default_settings
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    database = Database(settings.DATABASE_URL)
    database.create_all()
    db = database.session()
    try:
        seed_admin(Gateway(db), settings.SEED_ADMIN_EMAIL, settings.SEED_ADMIN_PASSWORD)
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    main()
