from typing import List


class FakeDriver:
    """Stands in for a Selenium WebDriver in browser-free tests."""

    def __init__(self, session_id="fake-session", fail_on=(), screenshot=b"\x89PNG fake"):
        self.session_id = session_id
        self.fail_on = set(fail_on)
        self.screenshot = screenshot
        self.calls: List[tuple] = []
        self.current_url = "data:,"
        self.title = "Fake Page"

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail_on:
            raise RuntimeError(f"{name} failed")

    def implicitly_wait(self, seconds):
        self._record("implicitly_wait", seconds)

    def set_page_load_timeout(self, seconds):
        self._record("set_page_load_timeout", seconds)

    def set_script_timeout(self, seconds):
        self._record("set_script_timeout", seconds)

    def maximize_window(self):
        self._record("maximize_window")

    def get_screenshot_as_png(self):
        self._record("get_screenshot_as_png")
        return self.screenshot

    def get(self, url):
        self._record("get", url)
        self.current_url = url

    def quit(self):
        self._record("quit")

    def called(self, name):
        return [call for call in self.calls if call[0] == name]
