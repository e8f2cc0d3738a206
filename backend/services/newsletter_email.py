"""
Newsletter email rendering.

Builds the subject, HTML body and list headers for a published post once,
so every recipient in a send receives the same message.
"""

from dataclasses import dataclass, field
from html import escape

from core.domain.content import ContentItem


@dataclass(frozen=True)
class NewsletterEmail:
    """A rendered newsletter issue ready to be sent to each recipient."""

    subject: str
    html: str
    headers: dict[str, str] = field(default_factory=dict)


def read_online_url(item: ContentItem, frontend_url: str) -> str:
    """Public URL of the post on the site."""
    return f"{frontend_url.rstrip('/')}/content/{item.slug}"


def build_newsletter_email(item: ContentItem, frontend_url: str) -> NewsletterEmail:
    """
    Render a post as a newsletter email.

    Args:
        item: Published post to send
        frontend_url: Site base URL for the "Read Online" and unsubscribe links

    Returns:
        NewsletterEmail with List-Unsubscribe and X-Newsletter-ID headers
    """
    url = read_online_url(item, frontend_url)
    return NewsletterEmail(
        subject=item.title,
        html=_get_newsletter_email_html(item, url),
        headers={
            "List-Unsubscribe": f"<{url}>",
            "X-Newsletter-ID": str(item.id),
        },
    )


def _get_newsletter_email_html(item: ContentItem, url: str) -> str:
    """Generate newsletter email HTML."""
    title = escape(item.title)
    excerpt = (
        f'<p style="font-size: 18px; color: #666; font-style: italic; margin-bottom: 20px;">'
        f"{escape(item.excerpt)}</p>"
        if item.excerpt
        else ""
    )
    image = (
        f'<img src="{escape(item.feature_image_url, quote=True)}" alt="{title}" '
        f'style="width: 100%; max-width: 500px; height: auto; border-radius: 8px; margin: 20px 0;">'
        if item.feature_image_url
        else ""
    )
    body = escape(item.content).replace("\n", "<br>")

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <title>{title}</title>
    </head>
    <body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; margin: 0; padding: 0;">
        <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
            <div style="text-align: center; border-bottom: 2px solid #f0f0f0; padding-bottom: 20px; margin-bottom: 30px;">
                <h1 style="color: #2c3e50; margin-bottom: 10px;">{title}</h1>
                {excerpt}
            </div>

            {image}

            <div style="margin-bottom: 30px;">
                {body}
            </div>

            <div style="text-align: center;">
                <a href="{url}" style="display: inline-block; background-color: #007bff; color: white; padding: 12px 24px; text-decoration: none; border-radius: 5px; margin: 20px 0;">
                    Read Online
                </a>
            </div>

            <div style="border-top: 2px solid #f0f0f0; padding-top: 20px; text-align: center; font-size: 14px; color: #666;">
                <p>Thank you for subscribing to our {item.content_type.value}!</p>
                <p style="font-size: 12px; color: #999;">
                    If you no longer wish to receive these emails, you can
                    <a href="{url}">manage your subscription preferences</a>.
                </p>
            </div>
        </div>
    </body>
    </html>
    """
