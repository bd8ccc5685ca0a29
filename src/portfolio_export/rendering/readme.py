"""README.txt generation for the exported archive."""

from ..models import Portfolio


def generate_readme(portfolio: Portfolio) -> str:
    """Render hosting instructions for the archive.

    The text holds no timestamps so repeated exports of the same document
    produce the same bytes.
    """
    locales = portfolio.enabled_locales
    default = portfolio.default_locale
    locale_dirs = ", ".join(f"/{loc}/" for loc in locales)
    locale_lines = "\n".join(f"  - {loc.upper()}: /{loc}/index.html" for loc in locales)
    content_files = ", ".join(f"{loc}/index.html" for loc in locales)

    return f"""Portfolio Export - Static Site
==============================

Project: {portfolio.name}

CONTENTS
--------
This archive contains a complete static website ready for hosting:

  /assets/
    /css/style.css         - Styles with theme tokens
    /js/main.js            - Animations and effects
    /img/*                 - Images used in the portfolio
  {locale_dirs}
    index.html             - One HTML page per locale
  README.txt               - This file

HOSTING INSTRUCTIONS
--------------------

1. STATIC HOSTING (recommended)
   - Netlify: drag and drop this folder to https://app.netlify.com/drop
   - Vercel: run "vercel --prod" in this directory
   - GitHub Pages: push to a repository, enable Pages in Settings
   - Cloudflare Pages: connect a repository or upload the folder

2. TRADITIONAL HOSTING (cPanel, FTP)
   - Upload all files to public_html or www
   - Keep the folder structure intact
   - Default page: /{default}/index.html

3. LOCAL TESTING
   - Start a local server in this directory:
     * Python: python3 -m http.server 8000
     * Node.js: npx serve .
   - Open http://localhost:8000/{default}/index.html

LANGUAGES
---------
This portfolio is available in {len(locales)} language(s):
{locale_lines}

Default language: {default.upper()}

CUSTOMIZATION
-------------
  - Styles: assets/css/style.css
  - Scripts: assets/js/main.js
  - Content: {content_files}

FEATURES
--------
  - Responsive layout (mobile, tablet, desktop)
  - Lazy-loaded images
  - Scroll animations and parallax, disabled under reduced motion
  - External links open with noopener/noreferrer

MADE WITH
---------
Portfolio Export - static-site export for portfolio documents
"""
