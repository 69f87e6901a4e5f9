from .smtp import NullMailer, SmtpMailer
from .templates import EmailTemplateLoader, RenderedEmail

__all__ = ["EmailTemplateLoader", "RenderedEmail", "SmtpMailer", "NullMailer"]
