"""
Overlay stylesheet and per-document style installation.
"""

from paywall_access.services.dom import Element
from paywall_access.services.ports import ElementHost

TAG = "amp-access-fewcents"

CSS = f"""
.{TAG}-container {{
  display: flex;
  flex-direction: row;
  font-family: Arial, Helvetica, sans-serif;
  border: 1px solid #e0e0e0;
  border-radius: 8px;
  overflow: hidden;
}}
.{TAG}-left-container {{
  flex: 0 0 30%;
  background: #f7f3ff;
}}
.{TAG}-left-logo-container {{
  min-height: 160px;
}}
.{TAG}-right-container {{
  flex: 1;
  padding: 16px 24px;
}}
.{TAG}-fc-logo-container {{
  font-weight: bold;
  font-size: 20px;
  color: #4a2a8c;
}}
.{TAG}-description-container {{
  font-size: 18px;
  margin-top: 8px;
}}
.{TAG}-subDescription-container {{
  font-size: 14px;
  color: #666;
}}
.{TAG}-price {{
  font-size: 16px;
  font-weight: bold;
  margin: 12px 0;
}}
.{TAG}-buttons-container {{
  display: flex;
  gap: 12px;
  align-items: center;
}}
.{TAG}-purchase-button {{
  cursor: pointer;
  background: none;
  border: none;
  text-decoration: underline;
}}
.{TAG}-purchase-button.primary {{
  background: #4a2a8c;
  color: #fff;
  border-radius: 4px;
  padding: 8px 16px;
  text-decoration: none;
}}
""".strip()


def install_styles_for_doc(document: ElementHost, css: str, extension_tag: str) -> Element:
    """Install `css` once per document under `extension_tag`; returns the style element."""
    existing = document.installed_styles.get(extension_tag)
    if existing is not None:
        return existing

    style = document.create_element("style")
    style.attributes["amp-extension"] = extension_tag
    style.text_content = css
    document.head.append_child(style)
    document.installed_styles[extension_tag] = style
    return style
