"""Mobile-friendliness checks on the rendered page."""

import logging

from analyzers.base import AnalyzerKind, BaseAnalyzer
from core import slots
from core.errors import AnalyzerError
from core.results import MobileResult, TapTarget

logger = logging.getLogger(__name__)

MIN_TAP_TARGET_PX = 44
MIN_FONT_SIZE_PX = 16
MAX_TAP_TARGET_SAMPLES = 10

# Sizes come from layout, so this has to run in the page rather than on
# the serialized HTML.
MOBILE_SCRIPT = """
() => {
  const visible = (el) => {
    const rect = el.getBoundingClientRect();
    const style = window.getComputedStyle(el);
    return rect.width > 0 && rect.height > 0 &&
      style.visibility !== 'hidden' && style.display !== 'none';
  };

  const meta = document.querySelector('meta[name="viewport"]');
  const viewport = meta ? (meta.getAttribute('content') || '') : null;

  const targets = document.querySelectorAll(
    'a, button, input[type="button"], input[type="submit"], input[type="reset"], [onclick], [role="button"]'
  );
  const small = [];
  let smallCount = 0;
  targets.forEach((el) => {
    if (!visible(el)) return;
    const rect = el.getBoundingClientRect();
    if (rect.width < %(tap)d || rect.height < %(tap)d) {
      smallCount++;
      if (small.length < %(samples)d) {
        const cls = typeof el.className === 'string' ? el.className.split(' ')[0] : '';
        small.push({
          element: el.tagName.toLowerCase() + (el.id ? '#' + el.id : '') + (cls ? '.' + cls : ''),
          width: Math.round(rect.width),
          height: Math.round(rect.height),
          text: (el.textContent || '').trim().substring(0, 50),
        });
      }
    }
  });

  const sizes = [];
  document.querySelectorAll('p, span, div, h1, h2, h3, h4, h5, h6, li, td, th').forEach((el) => {
    const size = parseFloat(window.getComputedStyle(el).fontSize);
    if (el.offsetParent !== null && size > 0 && (el.textContent || '').trim()) sizes.push(size);
  });

  const images = document.querySelectorAll('img');
  let nonResponsive = 0;
  images.forEach((img) => {
    const fluid = img.hasAttribute('srcset') || img.hasAttribute('sizes') ||
      img.style.maxWidth === '100%%' || img.style.width === '100%%';
    if (!fluid && img.offsetParent !== null) nonResponsive++;
  });

  const inputs = document.querySelectorAll('input');
  let generic = 0;
  inputs.forEach((input) => {
    const type = (input.type || '').toLowerCase();
    const key = ((input.name || '') + ' ' + (input.id || '')).toLowerCase();
    if (key.includes('email') && type !== 'email') generic++;
    else if ((key.includes('tel') || key.includes('phone')) && type !== 'tel') generic++;
    else if (key.includes('number') && type !== 'number') generic++;
  });

  return {
    viewport: viewport,
    targets: targets.length,
    smallTargets: smallCount,
    samples: small,
    fontSizes: sizes,
    pageWidth: document.documentElement.scrollWidth,
    viewportWidth: window.innerWidth,
    plugins: document.querySelectorAll('object, embed, applet').length,
    images: images.length,
    nonResponsiveImages: nonResponsive,
    inputs: inputs.length,
    genericInputs: generic,
  };
}
""" % {"tap": MIN_TAP_TARGET_PX, "samples": MAX_TAP_TARGET_SAMPLES}


def parse_viewport(content: str | None) -> tuple[bool, bool]:
    """Return ``(responsive, user_scalable)`` for a viewport meta content."""
    if content is None:
        return False, True
    directives = {}
    for part in content.replace(";", ",").split(","):
        key, _, value = part.partition("=")
        directives[key.strip().lower()] = value.strip().lower()

    responsive = directives.get("width") == "device-width"
    user_scalable = directives.get("user-scalable") not in ("no", "0")
    try:
        if float(directives.get("maximum-scale", "5")) < 2:
            user_scalable = False
    except ValueError:
        pass
    return responsive, user_scalable


class MobileAnalyzer(BaseAnalyzer):
    """
    Checks how usable the page is on a phone.

    Checks:
    - Viewport meta tag and pinch zoom
    - Tap targets smaller than 44x44 px
    - Text set below 16px
    - Content wider than the viewport
    - Plugin content (object, embed, applet)
    - Images without responsive sizing
    - Inputs missing email, tel or number types
    """

    kind = AnalyzerKind.PAGE
    writes = frozenset({slots.MOBILE})

    @property
    def name(self) -> str:
        return "mobile"

    async def run(self, ctx) -> None:
        data = await ctx.page.evaluate(MOBILE_SCRIPT)
        if not isinstance(data, dict):
            raise AnalyzerError(f"Unexpected mobile data from page: {data!r}")

        result = self.build_result(data)
        logger.info(
            f"Mobile checks for {ctx.url}: {result.small_tap_targets} small tap targets, "
            f"{result.small_text_elements}/{result.text_elements_total} small text elements"
        )
        ctx.set(slots.MOBILE, result)

    def build_result(self, data: dict) -> MobileResult:
        viewport = data.get("viewport")
        responsive, user_scalable = parse_viewport(viewport)
        font_sizes = [float(size) for size in data.get("fontSizes") or []]
        page_width = data.get("pageWidth")
        viewport_width = data.get("viewportWidth")

        return MobileResult(
            viewport=viewport,
            viewport_responsive=responsive,
            user_scalable=user_scalable,
            tap_targets_total=data.get("targets", 0),
            small_tap_targets=data.get("smallTargets", 0),
            small_tap_target_samples=[TapTarget(**sample) for sample in data.get("samples") or []],
            text_elements_total=len(font_sizes),
            small_text_elements=sum(1 for size in font_sizes if size < MIN_FONT_SIZE_PX),
            average_font_size=round(sum(font_sizes) / len(font_sizes), 1) if font_sizes else None,
            horizontal_scroll=bool(page_width and viewport_width and page_width > viewport_width),
            page_width=page_width,
            viewport_width=viewport_width,
            plugin_elements=data.get("plugins", 0),
            images_total=data.get("images", 0),
            non_responsive_images=data.get("nonResponsiveImages", 0),
            inputs_total=data.get("inputs", 0),
            generic_inputs=data.get("genericInputs", 0),
        )
