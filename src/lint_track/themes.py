"""Terminal colour themes.

A Theme is handed to whatever renders output; nothing in the package keeps
a "current" theme.
"""

from dataclasses import dataclass

import click


@dataclass(frozen=True)
class Style:
    fg: str
    bold: bool = False

    def __call__(self, text: str) -> str:
        return click.style(text, fg=self.fg, bold=self.bold)


@dataclass(frozen=True)
class Theme:
    name: str
    description: str
    title: Style
    error: Style
    warning: Style
    success: Style
    info: Style
    highlight: Style
    dim: Style = Style('bright_black')


THEMES = {
    'default': Theme(
        name='Default (Blue)',
        description='Classic blue theme with high contrast',
        title=Style('blue', bold=True),
        error=Style('red'),
        warning=Style('yellow'),
        success=Style('green'),
        info=Style('cyan'),
        highlight=Style('magenta'),
    ),
    'ocean': Theme(
        name='Ocean',
        description='Calming cyan and blue tones',
        title=Style('cyan', bold=True),
        error=Style('red'),
        warning=Style('yellow'),
        success=Style('bright_green'),
        info=Style('blue'),
        highlight=Style('bright_magenta'),
    ),
    'forest': Theme(
        name='Forest',
        description='Nature-inspired green theme',
        title=Style('green', bold=True),
        error=Style('bright_red'),
        warning=Style('bright_yellow'),
        success=Style('bright_green'),
        info=Style('cyan'),
        highlight=Style('magenta'),
    ),
    'sunset': Theme(
        name='Sunset',
        description='Warm magenta and orange tones',
        title=Style('magenta', bold=True),
        error=Style('bright_red'),
        warning=Style('yellow'),
        success=Style('green'),
        info=Style('bright_blue'),
        highlight=Style('bright_magenta'),
    ),
    'monochrome': Theme(
        name='Monochrome',
        description='Clean black and white aesthetic',
        title=Style('white', bold=True),
        error=Style('bright_black', bold=True),
        warning=Style('white'),
        success=Style('white', bold=True),
        info=Style('bright_black'),
        highlight=Style('white', bold=True),
    ),
}

DEFAULT_THEME = 'default'


def get_theme(name: str) -> Theme:
    """Look up a theme by key, falling back to the default for unknown names."""
    return THEMES.get(name, THEMES[DEFAULT_THEME])


def preview_theme(theme: Theme) -> str:
    """Sample lines showing each style of a theme."""
    return '\n'.join([
        theme.title(f"{theme.name}: {theme.description}"),
        theme.error('Error style'),
        theme.warning('Warning style'),
        theme.success('Success style'),
        theme.info('Info style'),
        theme.highlight('Highlight style'),
        theme.dim('Dim style'),
    ])
