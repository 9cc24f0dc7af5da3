"""
Registers a dashboard admin. There is no public sign-up route.

    python backend/scripts/create_admin.py --email admin@example.com --password secret123 [--notify]
"""
import argparse
import asyncio
import os
import sys

# run from a checkout without installing the package
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from citizen_feedback.core import mailer
from citizen_feedback.core.config import settings
from citizen_feedback.crud.admins import AdminAlreadyExistsError, create_admin
from citizen_feedback.db.mongo import close_mongo_connection, connect_to_mongo


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Create an admin account for the feedback dashboard.")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--notify", action="store_true", help="send a welcome email to the new admin")
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    args = parse_args(argv)

    if len(args.password) < settings.MIN_PASSWORD_LENGTH:
        print(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long")
        return 1

    await connect_to_mongo()
    try:
        try:
            admin = await create_admin(args.email, args.password)
        except AdminAlreadyExistsError:
            print(f"Admin already exists: {args.email}")
            return 1

        print(f"Created admin {admin.email} (id={admin.id})")

        if args.notify:
            try:
                await mailer.send_mail(admin.email, mailer.render_welcome_email(admin.email))
                print("Welcome email sent")
            except mailer.MailDeliveryError as e:
                print(f"Welcome email failed: {e}")
    finally:
        await close_mongo_connection()

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
