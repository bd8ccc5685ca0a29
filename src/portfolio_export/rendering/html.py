"""HTML page generation.

One page per enabled locale, built from per-section fragments in document
order. Rendering is pure: it reads the portfolio and the asset map only.
Optional data that is missing simply drops the markup that would show it,
and a locale's empty string renders as empty (no cross-locale fallback).
"""

from collections.abc import Mapping
from html import escape

from ..models import (
    LOCALE_NAMES,
    AboutSection,
    ContactSection,
    HeroSection,
    Portfolio,
    ProjectsSection,
    Section,
    SkillsSection,
    effective_image,
)
from .icons import MAIL_ICON, SOCIAL_ICONS

DEFAULT_CTA_COLOR = "#8b5cf6"
DEFAULT_CTA_LINK = "#"

# Pages live in <locale>/index.html, one level below the archive root
ROOT_PREFIX = "../"

EMPTY_SKILLS_MESSAGE = '<p style="text-align: center; color: #94a3b8;">No skills added yet.</p>'
EMPTY_PROJECTS_MESSAGE = (
    '<p style="text-align: center; color: #94a3b8;">No projects added yet.</p>'
)


def _text(value: str | None) -> str:
    return escape(value or "", quote=False)


def _attr(value: str | None) -> str:
    return escape(value or "", quote=True)


def _format_number(value: float) -> str:
    """Format a float the way it reads in the editor: 0.5, 1, 0.25."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def resolve_image(url: str | None, asset_map: Mapping[str, str]) -> str | None:
    """Page-relative src for an image: the collected copy, else the original URL."""
    if not url:
        return None
    local = asset_map.get(url)
    if local is None:
        return url
    return f"{ROOT_PREFIX}{local}"


def _chips(tags: list[str], container: str, item: str) -> str:
    if not tags:
        return ""
    chips = "".join(f'<span class="{item}">{_text(tag)}</span>' for tag in tags)
    return f"""
        <div class="{container}">
          {chips}
        </div>"""


def render_hero(section: HeroSection, locale: str) -> str:
    data = section.data
    blur_class = "blur-effect" if section.effects.blur else ""
    parallax = (
        f' data-parallax="{_format_number(section.effects.parallax)}"'
        if section.effects.parallax
        else ""
    )
    return f"""
    <section id="{_attr(section.id)}" class="hero-section"{parallax}>
      <div class="hero-content {blur_class}">
        <h1 class="hero-title">{_text(data.headline.get(locale))}</h1>
        <p class="hero-subtitle">{_text(data.subheadline.get(locale))}</p>
        <a href="{_attr(data.cta_link or DEFAULT_CTA_LINK)}" class="hero-cta" style="background-color: {_attr(data.cta_color or DEFAULT_CTA_COLOR)}">
          {_text(data.cta_button.get(locale))}
        </a>
      </div>
    </section>"""


def render_about(section: AboutSection, locale: str, asset_map: Mapping[str, str]) -> str:
    data = section.data
    src = resolve_image(effective_image(data.avatar, data.image_url), asset_map)
    alt = (data.avatar.alt if data.avatar else "") or "About me"
    avatar = (
        f'<img src="{_attr(src)}" alt="{_attr(alt)}" class="about-avatar" loading="lazy">'
        if src
        else ""
    )
    return f"""
    <section id="{_attr(section.id)}" class="about-section">
      <div class="about-content">
        {avatar}
        <h2 class="about-title">{_text(data.title.get(locale))}</h2>
        <p class="about-paragraph">{_text(data.paragraph.get(locale))}</p>{_chips(data.tags, "about-tags", "about-tag")}
      </div>
    </section>"""


def render_skills(section: SkillsSection, locale: str) -> str:
    data = section.data
    if data.skills:
        items = "".join(
            f"""
        <div class="skill-item">
          <p class="skill-name">{_text(skill.name)}</p>
          <div class="skill-bar-bg">
            <div class="skill-bar-fill" data-level="{skill.level}" style="width: 0%;"></div>
          </div>
        </div>"""
            for skill in data.skills
        )
        body = f"""
      <div class="skills-grid">{items}
      </div>"""
    else:
        body = EMPTY_SKILLS_MESSAGE
    return f"""
    <section id="{_attr(section.id)}" class="skills-section">
      <h2 class="skills-title">{_text(data.title.get(locale))}</h2>
      {body}
    </section>"""


def render_projects(section: ProjectsSection, locale: str, asset_map: Mapping[str, str]) -> str:
    data = section.data
    if not data.projects:
        body = EMPTY_PROJECTS_MESSAGE
    else:
        cards = []
        for project in data.projects:
            src = resolve_image(effective_image(project.image, project.image_url), asset_map)
            alt = (
                (project.image.alt if project.image else "")
                or project.title.get(locale)
                or "Project image"
            )
            image = (
                f'<img src="{_attr(src)}" alt="{_attr(alt)}" class="project-image" loading="lazy">'
                if src
                else ""
            )
            description = project.description.get(locale)
            description_html = (
                f'<p class="project-description">{_text(description)}</p>' if description else ""
            )
            link = (
                f'<a href="{_attr(project.link)}" class="project-link" target="_blank" '
                f'rel="noopener noreferrer">View Project →</a>'
                if project.link
                else ""
            )
            cards.append(
                f"""
        <div class="project-card">
          {image}
          <div class="project-content">
            <h3 class="project-title">{_text(project.title.get(locale))}</h3>
            {description_html}{_chips(project.tags, "project-tags", "project-tag")}
            {link}
          </div>
        </div>"""
            )
        body = f"""
      <div class="projects-grid">{"".join(cards)}
      </div>"""
    return f"""
    <section id="{_attr(section.id)}" class="projects-section">
      <h2 class="projects-title">{_text(data.title.get(locale))}</h2>
      {body}
    </section>"""


def render_contact(section: ContactSection, locale: str) -> str:
    data = section.data
    blur_class = "blur-effect" if section.effects.blur else ""
    socials = ""
    if data.social_links:
        links = "".join(
            f"""
        <a href="{_attr(link.url)}" class="contact-social-link" target="_blank" rel="noopener noreferrer" aria-label="{_attr(link.platform)}">
          {SOCIAL_ICONS.get(link.platform, "")}
        </a>"""
            for link in data.social_links
        )
        socials = f"""
      <div class="contact-socials">{links}
      </div>"""
    return f"""
    <section id="{_attr(section.id)}" class="contact-section {blur_class}">
      <h2 class="contact-title">{_text(data.title.get(locale))}</h2>
      <a href="mailto:{_attr(data.email)}" class="contact-email">
        {MAIL_ICON}
        {_text(data.email)}
      </a>{socials}
    </section>"""


def render_section(section: Section, locale: str, asset_map: Mapping[str, str]) -> str:
    """Render one section fragment for a locale."""
    match section:
        case HeroSection():
            return render_hero(section, locale)
        case AboutSection():
            return render_about(section, locale, asset_map)
        case SkillsSection():
            return render_skills(section, locale)
        case ProjectsSection():
            return render_projects(section, locale, asset_map)
        case ContactSection():
            return render_contact(section, locale)
    return ""


def _language_switcher(portfolio: Portfolio, locale: str) -> str:
    entries = []
    for code in portfolio.enabled_locales:
        name = LOCALE_NAMES[code]
        if code == locale:
            entries.append(f'<strong style="color: #8b5cf6;">{name}</strong>')
        else:
            entries.append(
                f'<a href="../{code}/index.html" '
                f'style="color: #94a3b8; text-decoration: none; margin: 0 5px;">{name}</a>'
            )
    return " | ".join(entries)


def generate_html(portfolio: Portfolio, locale: str, asset_map: Mapping[str, str]) -> str:
    """Render the full page for one locale."""
    name = _attr(portfolio.name)
    sections_html = "\n".join(
        render_section(section, locale, asset_map) for section in portfolio.sections
    )
    return f"""<!DOCTYPE html>
<html lang="{_attr(locale)}">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <meta http-equiv="X-UA-Compatible" content="IE=edge">
  <title>{name} - Portfolio</title>
  <meta name="description" content="{name} - Professional portfolio">
  <meta name="author" content="{name}">

  <!-- Open Graph / Facebook -->
  <meta property="og:type" content="website">
  <meta property="og:title" content="{name} - Portfolio">
  <meta property="og:description" content="Professional portfolio">

  <!-- Twitter -->
  <meta name="twitter:card" content="summary_large_image">
  <meta name="twitter:title" content="{name} - Portfolio">
  <meta name="twitter:description" content="Professional portfolio">

  <!-- Styles -->
  <link rel="stylesheet" href="../assets/css/style.css">

  <!-- Favicon -->
  <link rel="icon" href="data:image/svg+xml,<svg xmlns='http://www.w3.org/2000/svg' viewBox='0 0 100 100'><text y='.9em' font-size='90'>📁</text></svg>">
</head>
<body>
  <!-- Portfolio Content -->
  {sections_html}

  <!-- Language Switcher (optional - commented out by default) -->
  <!--
  <div style="position: fixed; bottom: 20px; right: 20px; background: rgba(30, 41, 59, 0.9); padding: 10px; border-radius: 8px; backdrop-filter: blur(8px);">
    {_language_switcher(portfolio, locale)}
  </div>
  -->

  <!-- Scripts -->
  <script src="../assets/js/main.js"></script>
</body>
</html>
"""


def generate_pages(portfolio: Portfolio, asset_map: Mapping[str, str]) -> dict[str, str]:
    """Render every enabled locale, keyed by locale code in enabled order."""
    return {
        locale: generate_html(portfolio, locale, asset_map)
        for locale in portfolio.enabled_locales
    }
