"""
Notificaciones por email usando Resend
Documentación: https://resend.com/docs

Son funciones síncronas: BackgroundTasks las corre en el threadpool y la
llamada bloqueante a Resend no frena el event loop. Un fallo se registra en el log
y nunca hace fallar la request que las disparó.
"""
import html
import logging

import resend

from ..config import get_settings

logger = logging.getLogger(__name__)


def is_email_service_configured() -> bool:
    """Verifica si hay API key y destinatario configurados"""
    settings = get_settings()
    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY no configurada en variables de entorno")
        return False
    if not settings.notification_email:
        logger.warning("NOTIFICATION_EMAIL no configurado, no hay destinatario")
        return False
    return True


def _contact_html(form_data: dict) -> str:
    name = html.escape(form_data.get("name", "").strip() or "Anonymous")
    email = html.escape(form_data.get("email", "").strip() or "Not provided")
    subject = html.escape(form_data.get("subject", "").strip())
    message = html.escape(form_data.get("message", "").strip())
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #1f2937; max-width: 640px; margin: 0 auto; padding: 24px; background: #f9fafb;">
        <div style="background: #0f172a; color: white; padding: 20px; border-radius: 12px 12px 0 0; text-align: center;">
            <h1 style="margin: 0; font-size: 20px;">📨 New contact message</h1>
        </div>
        <div style="background: white; padding: 24px; border: 1px solid #e5e7eb; border-top: none; border-radius: 0 0 12px 12px;">
            <table style="width: 100%; border-collapse: collapse; margin-bottom: 16px;">
                <tr><td style="padding: 6px 0; color: #6b7280;">Name</td><td style="padding: 6px 0; font-weight: 600;">{name}</td></tr>
                <tr><td style="padding: 6px 0; color: #6b7280;">Email</td><td style="padding: 6px 0; font-weight: 600;">{email}</td></tr>
                <tr><td style="padding: 6px 0; color: #6b7280;">Subject</td><td style="padding: 6px 0; font-weight: 600;">{subject}</td></tr>
            </table>
            <div style="padding: 12px; background: #f3f4f6; border-radius: 8px; color: #374151; white-space: pre-wrap;">{message}</div>
        </div>
    </body>
    </html>
    """


def send_contact_notification(form_data: dict) -> bool:
    """
    Envía el mensaje del formulario de contacto al dueño del portfolio.
    Usa el correo del remitente como Reply-To.

    Returns:
        bool: True si el email se envió, False si no está configurado o falló
    """
    if not is_email_service_configured():
        logger.warning("Servicio de email no configurado, no se enviará notificación de contacto")
        return False

    settings = get_settings()
    try:
        resend.api_key = settings.resend_api_key
        params = {
            "from": settings.from_email,
            "to": [settings.notification_email],
            "subject": f"Portfolio contact: {form_data.get('subject', '').strip()}",
            "html": _contact_html(form_data),
        }
        if form_data.get("email"):
            params["reply_to"] = [form_data["email"]]

        response = resend.Emails.send(params)
        logger.info(f"Notificación de contacto enviada. ID: {response.get('id', 'N/A')}")
        return True
    except Exception as e:
        # Tarea desacoplada: se registra y no se propaga
        logger.error(f"Error al enviar notificación de contacto: {str(e)}", exc_info=True)
        return False
