# create_admin.py
#
# Bootstrap an admin account. Self-registration never grants admin,
# so the first one has to be created directly in the store.
#
#   python create_admin.py "Admin" admin@example.com s3cret

import sys

from sqlmodel import Session

from app.database import create_db_and_tables, engine
from app.repositories.user_repo import UserRepository
from app.schemas.user import UserWrite
from app.services.user_service import UserService


def main():
    if len(sys.argv) != 4:
        print("usage: python create_admin.py <name> <email> <password>")
        sys.exit(2)

    name, email, password = sys.argv[1:]
    create_db_and_tables()

    service = UserService(UserRepository())
    with Session(engine) as session:
        user = service.create_user(
            session,
            UserWrite(name=name, email=email, password=password, is_admin=True),
            allow_admin=True,
        )

    print(f"Admin created: {user.email} ({user.id})")


if __name__ == "__main__":
    main()
