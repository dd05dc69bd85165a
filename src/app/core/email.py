"""
Email Service using Resend

Transactional emails for account activation and password reset.

send_email never raises: it returns False on failure and callers decide
whether that is fatal (activation/reset links) or not.
"""

import asyncio
import logging
from html import escape

import resend

from app.core.config import settings

logger = logging.getLogger(__name__)

resend.api_key = settings.resend_api_key

_BASE_STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 30px 20px; }
    .button { display: inline-block; background-color: #ffc107; color: #000; padding: 12px 24px;
              border-radius: 6px; text-decoration: none; font-weight: bold; margin: 20px 0; }
    .notice { background-color: #f8f9fa; padding: 15px; border-radius: 6px; margin: 20px 0; font-size: 14px; }
    .footer { margin-top: 30px; color: #666; font-size: 14px; }
"""


def _render(body: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <head><style>{_BASE_STYLE}</style></head>
    <body><div class="container">{body}</div></body>
    </html>
    """


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
) -> bool:
    """
    Send an email using Resend.

    Returns:
        True if the email was accepted by the provider
    """
    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        params: resend.Emails.SendParams = {
            "from": settings.email_from,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }

        # Resend's client is synchronous
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


async def send_activation_email(to_email: str, first_name: str | None, token: str) -> bool:
    """Welcome email for a newly registered student, with the activation link."""
    safe_name = escape(first_name or "cher étudiant")
    activation_url = f"{settings.frontend_url}/activate?token={token}"

    body = f"""
        <p>Bonjour <strong>{safe_name}</strong>,</p>
        <p>Félicitations et bienvenue à <strong>La Ruche Académie</strong> !</p>
        <p>Ton inscription est finalisée. Active ton compte pour définir ton mot de passe :</p>
        <a href="{activation_url}" class="button">Activer mon compte</a>
        <p>Sur ton espace personnel tu retrouveras ton calendrier de cours, tes formateurs
        et les ressources mises à ta disposition.</p>
        <div class="notice">Ce lien est valable {settings.activation_token_ttl_hours} heures.</div>
        <div class="footer">
            <p>Une difficulté ? Écris-nous à {escape(settings.support_email)}.</p>
            <p>L'équipe de La Ruche Académie</p>
        </div>
    """
    return await send_email(
        to_email=to_email,
        subject="Bienvenue à La Ruche Académie : ton accès à la plateforme est prêt",
        html_content=_render(body),
    )


async def send_teacher_activation_email(to_email: str, first_name: str | None, token: str) -> bool:
    """Activation email for a teacher account created by an administrator."""
    safe_name = escape(first_name or "")
    activation_url = f"{settings.frontend_url}/activate?token={token}"

    body = f"""
        <h2>Bonjour {safe_name},</h2>
        <p>Votre compte enseignant a été créé sur la plateforme La Ruche Académie.</p>
        <p>Cliquez sur le bouton ci-dessous afin d'activer votre compte et choisir votre mot de passe :</p>
        <a href="{activation_url}" class="button">Activer mon compte</a>
        <div class="notice">Ce lien est valable {settings.activation_token_ttl_hours} heures.</div>
        <div class="footer"><p>L'équipe de La Ruche Académie</p></div>
    """
    return await send_email(
        to_email=to_email,
        subject="Activation de votre compte enseignant",
        html_content=_render(body),
    )


async def send_password_reset_email(to_email: str, first_name: str | None, token: str) -> bool:
    """Password reset link."""
    safe_name = escape(first_name or "cher utilisateur")
    reset_url = f"{settings.frontend_url}/reset-password?token={token}"

    body = f"""
        <h1>Réinitialisation de mot de passe</h1>
        <p>Bonjour <strong>{safe_name}</strong>,</p>
        <p>Vous avez demandé la réinitialisation du mot de passe de votre compte La Ruche Académie.</p>
        <a href="{reset_url}" class="button">Réinitialiser mon mot de passe</a>
        <div class="notice">
            <strong>Important :</strong><br>
            Ce lien est valable {settings.reset_token_ttl_minutes} minutes.<br>
            Si vous n'avez pas demandé cette réinitialisation, ignorez ce message.
            Votre mot de passe actuel reste inchangé.
        </div>
        <p>Si le bouton ne fonctionne pas, copiez cette adresse dans votre navigateur :</p>
        <p style="word-break: break-all;">{reset_url}</p>
        <div class="footer">
            <p>Besoin d'aide ? Contactez-nous à {escape(settings.support_email)}.</p>
            <p>L'équipe La Ruche Académie</p>
        </div>
    """
    return await send_email(
        to_email=to_email,
        subject="Réinitialisation de votre mot de passe - La Ruche Académie",
        html_content=_render(body),
    )
