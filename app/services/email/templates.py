# ===== app/services/email/templates.py =====
"""HTML bodies for customer emails (French, like the storefront)"""
from html import escape
from typing import List, Optional, Tuple

from app.config.settings import settings


def _value(value) -> str:
    return escape(str(value)) if value not in (None, "") else "-"


def _layout(title: str, greeting: str, intro: str, rows: List[Tuple[str, object]],
            footer_note: str, recipient: Optional[str]) -> str:
    rows_html = "".join(
        f"""
                <tr>
                    <td style="padding: 6px 0; color: #B0B0B0;">{escape(label)}</td>
                    <td style="padding: 6px 0; text-align: right; font-weight: bold;">{_value(value)}</td>
                </tr>"""
        for label, value in rows
    )

    return f"""
        <!DOCTYPE html>
        <html lang="fr">
        <head>
            <meta charset="UTF-8">
            <meta name="viewport" content="width=device-width, initial-scale=1.0">
            <title>{escape(title)} - {escape(settings.BUSINESS_NAME)}</title>
        </head>
        <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #F0F0F0; background-color: #111; max-width: 600px; margin: 0 auto; padding: 20px;">
            <div style="background: linear-gradient(135deg, #1a1a1a 0%, #333 100%); padding: 30px; text-align: center; border-radius: 10px 10px 0 0;">
                <h1 style="color: #FFD700; margin: 0; font-size: 28px;">{escape(settings.BUSINESS_NAME)}</h1>
                <p style="color: #B0B0B0; margin: 4px 0 0;">Excellence &amp; Performance</p>
            </div>

            <div style="background-color: #1c1c1c; padding: 30px; border-radius: 0 0 10px 10px;">
                <h2 style="margin-top: 0;">{escape(greeting)}</h2>
                <p style="font-size: 16px;">{intro}</p>

                <table style="width: 100%; border-collapse: collapse; margin: 20px 0;">{rows_html}
                </table>

                <p style="font-size: 14px; color: #FFD700; text-align: center;">{footer_note}</p>
                <div style="text-align: center; margin: 24px 0;">
                    <a href="{escape(settings.FRONTEND_URL)}/account" style="background-color: #FFD700; color: #111; padding: 12px 28px; text-decoration: none; border-radius: 6px; font-weight: bold;">Voir Mon Compte</a>
                </div>
            </div>

            <p style="font-size: 12px; color: #777; text-align: center;">
                &copy; {escape(settings.BUSINESS_NAME)}. Cet email a été envoyé à {_value(recipient)}
            </p>
        </body>
        </html>
        """


def registration_email(user_name: str, user_email: str, confirm_link: str) -> str:
    return _layout(
        title="Bienvenue",
        greeting=f"Bienvenue {user_name} !",
        intro=(
            f"Merci pour votre inscription. Pour confirmer votre adresse e-mail, "
            f'<a href="{escape(confirm_link)}" style="color: #FFD700;">cliquez ici</a>.'
        ),
        rows=[("Email", user_email)],
        footer_note="Si vous n'avez pas demandé cet e-mail, ignorez-le.",
        recipient=user_email,
    )


def booking_confirmation_email(data: dict) -> str:
    return _layout(
        title="Réservation Confirmée",
        greeting="Réservation Confirmée !",
        intro=(
            f"Bonjour {_value(data.get('user_name'))},<br><br>"
            "Nous avons le plaisir de confirmer votre rendez-vous. "
            "Notre équipe prendra soin de votre véhicule avec la plus grande attention."
        ),
        rows=[
            ("Service", data.get("service")),
            ("Durée", data.get("duration")),
            ("Date", data.get("date")),
            ("Heure", data.get("time")),
            ("Véhicule", data.get("vehicle_type")),
            ("Plaque d'immatriculation", data.get("license_plate")),
            ("Tarif Total", data.get("price")),
        ],
        footer_note="Besoin de modifier ou annuler ? Connectez-vous à votre compte pour gérer vos rendez-vous.",
        recipient=data.get("user_email"),
    )


def booking_modification_email(data: dict) -> str:
    return _layout(
        title="Rendez-vous Modifié",
        greeting="Rendez-vous Modifié !",
        intro=(
            f"Bonjour {_value(data.get('user_name'))},<br><br>"
            "Votre rendez-vous a été modifié. Voici les nouvelles informations."
        ),
        rows=[
            ("Service", data.get("service")),
            ("Ancienne date", data.get("old_date")),
            ("Ancienne heure", data.get("old_time")),
            ("Nouvelle date", data.get("new_date")),
            ("Nouvelle heure", data.get("new_time")),
            ("Véhicule", data.get("vehicle_type")),
            ("Plaque d'immatriculation", data.get("license_plate")),
            ("Statut", data.get("status")),
            ("Tarif Total", data.get("price")),
        ],
        footer_note="Une question ? Répondez simplement à cet email.",
        recipient=data.get("user_email"),
    )


def booking_cancellation_email(data: dict) -> str:
    return _layout(
        title="Réservation Annulée",
        greeting="Réservation Annulée",
        intro=(
            f"Bonjour {_value(data.get('user_name'))},<br><br>"
            "Votre rendez-vous a été annulé. Vous pouvez réserver un nouveau créneau à tout moment."
        ),
        rows=[
            ("Service", data.get("service")),
            ("Date", data.get("date")),
            ("Heure", data.get("time")),
        ],
        footer_note="Nous espérons vous revoir bientôt.",
        recipient=data.get("user_email"),
    )


def appointment_confirmation_email(data: dict) -> str:
    return _layout(
        title="Rendez-vous Confirmé",
        greeting="Rendez-vous Confirmé !",
        intro=f"Bonjour {_value(data.get('client_name'))},<br><br>Votre rendez-vous conseil est confirmé.",
        rows=[
            ("Date", data.get("date_time")),
            ("Conseiller", data.get("advisor_name")),
            ("Lieu", data.get("location")),
            ("Référence", data.get("appointment_id")),
        ],
        footer_note="À très bientôt.",
        recipient=data.get("client_email"),
    )
