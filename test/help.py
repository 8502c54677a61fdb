"""
Help rendering behavioral tests.

Scope
- Exact help lines for every flag kind (names, placeholder, usage, default).
- Per-kind default display rules (bool/numbers always, strings when
  non-empty, slices when some element is non-empty, default_text verbatim).
- Environment hints on POSIX and Windows.
- Custom name prefixer; determinism of render().
"""
import unittest
from datetime import datetime, timedelta
from unittest import TestCase

from pennant.flags import *
from pennant.help import *


class Parser:
    """two-element value parsed from "a,b"."""

    def __init__(self, first="", second=""):
        self.first = first
        self.second = second

    def set(self, text):
        parts = text.split(",")
        if len(parts) != 2:
            raise ValueError("invalid format")
        self.first, self.second = parts

    def __str__(self):
        return "%s,%s" % (self.first, self.second)


class TestRender(TestCase):

    def assertRendered(self, flag, expected):
        self.assertEqual(render(flag, platform="linux"), expected)

    def testBool(self):
        self.assertRendered(BoolFlag("help"), "--help\t(default: false)")
        self.assertRendered(BoolFlag("v", usage="verbose", value=True), "-v\tverbose (default: true)")

    def testStringPlaceholder(self):
        self.assertRendered(
            StringFlag("f", usage="The total `foo` desired", value="all"),
            '-f foo\tThe total foo desired (default: "all")',
        )

    def testAliasesShareThePlaceholder(self):
        self.assertRendered(
            StringFlag("config", aliases=["c"], usage="Load configuration from `FILE`"),
            "--config FILE, -c FILE\tLoad configuration from FILE",
        )

    def testDefaultText(self):
        self.assertRendered(
            StringFlag("foo", usage="amount of `foo` requested", value="none", default_text="all of it"),
            "--foo foo\tamount of foo requested (default: all of it)",
        )

    def testEmptyStringHidden(self):
        self.assertRendered(StringFlag("name"), "--name value\t")
        self.assertRendered(PathFlag("path", usage="a path"), "--path value\ta path")

    def testNumbers(self):
        self.assertRendered(IntFlag("hats", value=9), "--hats value\t(default: 9)")
        self.assertRendered(IntFlag("hats"), "--hats value\t(default: 0)")
        self.assertRendered(Int64Flag("hats", value=8589934592), "--hats value\t(default: 8589934592)")
        self.assertRendered(UintFlag("hats", value=41), "--hats value\t(default: 41)")
        self.assertRendered(Uint64Flag("hats", value=8589934582), "--hats value\t(default: 8589934582)")
        self.assertRendered(Float64Flag("hats", value=0.1), "--hats value\t(default: 0.1)")

    def testDuration(self):
        self.assertRendered(DurationFlag("hats", value=timedelta(seconds=1)), "--hats value\t(default: 1s)")
        self.assertRendered(DurationFlag("hats"), "--hats value\t(default: 0s)")

    def testTime(self):
        self.assertRendered(TimeFlag("since"), "--since value\t")
        self.assertRendered(
            TimeFlag("since", value=datetime(2020, 5, 25, 20, 20, 20)),
            "--since value\t(default: 2020-05-25T20:20:20)",
        )

    def testIntSlice(self):
        self.assertRendered(IntSliceFlag("H", aliases=["heads"], value=[9, 3]), "-H value, --heads value\t(default: 9, 3)")
        self.assertRendered(IntSliceFlag("heads"), "--heads value\t")

    def testStringSlice(self):
        self.assertRendered(
            StringSliceFlag("dee", aliases=["d"], value=["Inka", "Dinka", "dooo"]),
            '--dee value, -d value\t(default: "Inka", "Dinka", "dooo")',
        )
        self.assertRendered(StringSliceFlag("foo", value=[""]), "--foo value\t")

    def testFloat64Slice(self):
        self.assertRendered(Float64SliceFlag("heads", value=[0.1234, -10.5]), "--heads value\t(default: 0.1234, -10.5)")

    def testDurationSlice(self):
        self.assertRendered(
            DurationSliceFlag("wait", value=[timedelta(seconds=1), timedelta(minutes=2)]),
            "--wait value\t(default: 1s, 2m0s)",
        )

    def testGeneric(self):
        self.assertRendered(
            GenericFlag("toads", value=Parser("abc", "def"), usage="test flag"),
            "--toads value\ttest flag (default: abc,def)",
        )
        self.assertRendered(GenericFlag("toads", type=Parser), "--toads value\t")

    def testEnvironmentHintPosix(self):
        self.assertRendered(IntFlag("hats", value=9, env_vars="APP_HATS"), "--hats value\t(default: 9) [$APP_HATS]")
        self.assertRendered(
            StringFlag("foo", usage="the `bar`", env_vars=["APP_FOO", "APP_BAR"]),
            "--foo bar\tthe bar [$APP_FOO, $APP_BAR]",
        )

    def testEnvironmentHintWindows(self):
        flag = IntFlag("hats", value=9, env_vars=["APP_HATS", "HATS"])
        self.assertEqual(render(flag, platform="win32"), "--hats value\t(default: 9) [%APP_HATS%, %HATS%]")

    def testPrefixer(self):
        def prefixer(names, placeholder):
            return " | ".join("/" + name for name in names) + (" <%s>" % placeholder if placeholder else "")

        flag = StringFlag("config", aliases=["c"], usage="from `FILE`")
        self.assertEqual(render(flag, prefixer=prefixer), "/config | /c <FILE>\tfrom FILE")

    def testDeterministic(self):
        flag = StringSliceFlag("dee", aliases=["d"], value=["Inka"], env_vars=["APP_DEE"])
        self.assertEqual(render(flag, platform="linux"), render(flag, platform="linux"))

    def testStrUsesRender(self):
        flag = StringFlag("f", usage="The total `foo` desired", value="all")
        self.assertEqual(str(flag), '-f foo\tThe total foo desired (default: "all")')


class TestHelpers(TestCase):

    def testUnquoteUsage(self):
        self.assertEqual(unquote_usage("Load configuration from `FILE`"), ("FILE", "Load configuration from FILE"))
        self.assertEqual(unquote_usage("`a` and `b`"), ("a", "a and `b`"))
        self.assertEqual(unquote_usage("no placeholder"), ("", "no placeholder"))
        self.assertEqual(unquote_usage("dangling `quote"), ("", "dangling `quote"))

    def testPrefixedNames(self):
        self.assertEqual(prefixed_names(["config", "c"], "FILE"), "--config FILE, -c FILE")
        self.assertEqual(prefixed_names(["v"], ""), "-v")

    def testEnvHint(self):
        self.assertEqual(env_hint([], "linux"), "")
        self.assertEqual(env_hint(["A", "B"], "linux"), " [$A, $B]")
        self.assertEqual(env_hint(["A"], "win32"), " [%A%]")

    def testDefaultTextOf(self):
        self.assertEqual(default_text_of(StringFlag("s", value="x")), '"x"')
        self.assertEqual(default_text_of(StringFlag("s")), "")
        self.assertEqual(default_text_of(BoolFlag("b")), "false")


if __name__ == "__main__":
    unittest.main()
