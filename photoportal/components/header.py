class Header:
    """Site title and the light/dark display toggle."""

    def __init__(self, title: str, prefers_dark: bool = False):
        self.title = title
        self.is_dark_mode = prefers_dark

    @property
    def mode(self) -> str:
        return "dark" if self.is_dark_mode else "light"

    def toggle(self) -> str:
        self.is_dark_mode = not self.is_dark_mode
        return self.mode
