"""Donor notification tasks."""

import logging
from html import escape
from uuid import UUID

from app.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


def render_thank_you_email(donor_name: str, charity_name: str, note: str) -> tuple[str, str]:
    """Subject and HTML body of the thank-you email."""
    subject = f"A Thank You For Your Recent Donation to {charity_name}!"
    html = f"""
<div style="font-family: sans-serif; padding: 20px; border: 1px solid #ddd; border-radius: 8px;">
  <h2 style="color: #005AA7;">Dear {escape(donor_name)},</h2>
  <p>Thank you for your recent donation. The items you provided have been safely
  received by <b>{escape(charity_name)}</b>.</p>
  <h3 style="color: #333;">A Note From the Charity:</h3>
  <blockquote style="border-left: 4px solid #005AA7; padding-left: 15px; font-style: italic;">
    <p>{escape(note)}</p>
  </blockquote>
  <p>Warmly,</p>
  <p><b>The Team at Generous Hands &amp; {escape(charity_name)}</b></p>
</div>
"""
    return subject, html


@celery_app.task(name="app.tasks.notifications.send_thank_you_email")
def send_thank_you_email(donation_id: str) -> dict:
    """
    Email the donor the charity's thank-you note.

    Queued after a charity confirms a donation. Donations without a donor
    email are skipped.

    Args:
        donation_id: UUID of the confirmed donation
    """
    # Import here to avoid circular imports and to get fresh db session
    import asyncio

    async def _send_thank_you():
        from sqlalchemy import select
        from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
        from sqlalchemy.orm import joinedload

        from app.config import get_settings
        from app.models import Donation, DonationStatus, User
        from app.services.email import EmailClient

        settings = get_settings()
        engine = create_async_engine(settings.async_database_url)
        session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

        try:
            async with session_factory() as db:
                query = (
                    select(Donation)
                    .options(joinedload(Donation.charity).joinedload(User.charity_profile))
                    .where(Donation.id == UUID(donation_id))
                )
                result = await db.execute(query)
                donation = result.scalar_one_or_none()

                if not donation:
                    logger.error(f"Donation {donation_id} not found")
                    return {"success": False, "error": "Donation not found"}

                if donation.status != DonationStatus.CONFIRMED.value:
                    logger.warning(f"Donation {donation_id} is {donation.status}, not confirmed")
                    return {"success": False, "error": "Donation not confirmed"}

                if not donation.donor_email:
                    logger.info(f"No donor email for donation {donation.public_id}, skipping")
                    return {"success": False, "error": "No donor email"}

                charity = donation.charity
                charity_name = (
                    charity.charity_profile.charity_name if charity.charity_profile else charity.name
                )
                subject, html = render_thank_you_email(
                    donation.donor_name, charity_name, donation.thank_you_note or ""
                )

                client = EmailClient()
                try:
                    response = await client.send_email(donation.donor_email, subject, html)
                finally:
                    await client.close()

                logger.info(f"Thank-you email sent for donation {donation.public_id}")
                return {"success": True, "message_id": response.get("id")}
        finally:
            await engine.dispose()

    return asyncio.run(_send_thank_you())
