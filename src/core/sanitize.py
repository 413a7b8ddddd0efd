import html


def sanitize_html(text) -> str:
    """
    Escapa os caracteres com significado em HTML (& < > " ') antes de gravar
    ou exibir texto livre enviado pelos formulários.
    """
    if text is None:
        return ""
    return html.escape(str(text), quote=True)
