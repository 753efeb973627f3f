"""Create a customer with a system administrator and print an access token."""

from __future__ import annotations

import argparse

from backoffice.domain.constants import ROLE_SYSTEM_ADMIN, UserStatus
from backoffice.domain.entities import Customer, Role, User
from backoffice.domain.exceptions import ApplicationError
from backoffice.infrastructure.database import SessionLocal, initialize_database
from backoffice.infrastructure.repositories import CustomerRepository, UserRepository
from backoffice.infrastructure.security import create_access_token


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create an initial customer and system administrator.",
    )
    parser.add_argument("--customer", default="Default customer", help="Customer name")
    parser.add_argument("--name", default="Administrator", help="Full name of the administrator")
    parser.add_argument("--email", default="admin@example.com", help="Administrator email")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    initialize_database()

    session = SessionLocal()
    try:
        users = UserRepository(session)
        if users.get_by_email(args.email) is not None:
            raise SystemExit(f"A user with email {args.email} already exists")

        customer = CustomerRepository(session).create(Customer(id=None, name=args.customer))
        user = users.create(
            User(
                id=None,
                email=args.email,
                full_name=args.name,
                customer_id=customer.id,
                role=Role(id=None, name="System administrator", system_role=ROLE_SYSTEM_ADMIN),
                status=UserStatus.ACTIVE.value,
            )
        )
    except ApplicationError as exc:
        raise SystemExit(f"Could not seed the administrator: {exc}") from exc
    finally:
        session.close()

    print(
        "Administrator created:\n"
        f"  Customer: {customer.name} ({customer.id})\n"
        f"  User: {user.full_name} <{user.email}> ({user.id})\n"
        f"  Access token: {create_access_token(user.id)}"
    )


if __name__ == "__main__":
    main()
