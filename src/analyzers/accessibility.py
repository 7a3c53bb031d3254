"""Accessibility analysis with axe-core or a built-in DOM rule set."""

import logging
from pathlib import Path

from bs4 import BeautifulSoup, Tag

from analyzers.base import AnalyzerKind, BaseAnalyzer
from core import slots
from core.errors import AnalyzerError
from core.results import AccessibilityResult, Violation

logger = logging.getLogger(__name__)

AXE_SCRIPT = """
async () => {
  const result = await axe.run(document, {
    runOnly: {type: 'tag', values: ['wcag2a', 'wcag2aa', 'wcag21a', 'wcag21aa', 'best-practice']},
    resultTypes: ['violations'],
  });
  const ids = (items) => (items || []).map((item) => item.id);
  return {
    violations: result.violations.map((v) => ({
      id: v.id,
      impact: v.impact || 'moderate',
      help: v.help,
      help_url: v.helpUrl,
      tags: v.tags,
      nodes: v.nodes.length,
      targets: v.nodes.slice(0, 5).map((n) => String(n.target)),
    })),
    passes: (result.passes || []).length,
    rules: [].concat(
      ids(result.violations), ids(result.passes), ids(result.incomplete), ids(result.inapplicable)
    ),
  };
}
"""

VALID_ROLES = frozenset(
    """
    alert alertdialog application article banner blockquote button caption cell checkbox
    code columnheader combobox complementary contentinfo definition deletion dialog directory
    document emphasis feed figure form generic grid gridcell group heading img insertion link
    list listbox listitem log main marquee math menu menubar menuitem menuitemcheckbox
    menuitemradio meter navigation none note option paragraph presentation progressbar radio
    radiogroup region row rowgroup rowheader scrollbar search searchbox separator slider
    spinbutton status strong subscript superscript switch tab table tablist tabpanel term
    textbox time timer toolbar tooltip tree treegrid treeitem
    """.split()
)

VALID_ARIA_ATTRIBUTES = frozenset(
    """
    aria-activedescendant aria-atomic aria-autocomplete aria-braillelabel
    aria-brailleroledescription aria-busy aria-checked aria-colcount aria-colindex
    aria-colindextext aria-colspan aria-controls aria-current aria-describedby
    aria-description aria-details aria-disabled aria-dropeffect aria-errormessage
    aria-expanded aria-flowto aria-grabbed aria-haspopup aria-hidden aria-invalid
    aria-keyshortcuts aria-label aria-labelledby aria-level aria-live aria-modal
    aria-multiline aria-multiselectable aria-orientation aria-owns aria-placeholder
    aria-posinset aria-pressed aria-readonly aria-relevant aria-required
    aria-roledescription aria-rowcount aria-rowindex aria-rowindextext aria-rowspan
    aria-selected aria-setsize aria-sort aria-valuemax aria-valuemin aria-valuenow
    aria-valuetext
    """.split()
)

UNLABELLED_INPUT_TYPES = {"hidden", "submit", "reset", "button", "image"}

BUILTIN_RULES = {
    # rule id: (impact, help, tags)
    "image-alt": ("critical", "Images must have alternate text", ["wcag2a", "wcag111"]),
    "html-has-lang": ("serious", "<html> element must have a lang attribute", ["wcag2a", "wcag311"]),
    "document-title": ("serious", "Documents must have <title> element", ["wcag2a", "wcag242"]),
    "label": ("critical", "Form elements must have labels", ["wcag2a", "wcag412"]),
    "button-name": ("critical", "Buttons must have discernible text", ["wcag2a", "wcag412"]),
    "link-name": ("serious", "Links must have discernible text", ["wcag2a", "wcag244"]),
    "frame-title": ("serious", "Frames must have an accessible name", ["wcag2a", "wcag412"]),
    "aria-roles": ("critical", "ARIA roles used must conform to valid values", ["wcag2a", "wcag412"]),
    "aria-valid-attr": ("critical", "ARIA attributes must conform to valid names", ["wcag2a", "wcag412"]),
    "tabindex": ("serious", "Elements should not have tabindex greater than zero", ["best-practice", "cat.keyboard"]),
    "meta-viewport": ("critical", "Zooming and scaling must not be disabled", ["wcag2aa", "wcag144"]),
    "heading-order": ("moderate", "Heading levels should only increase by one", ["best-practice"]),
}


def _selector(element: Tag) -> str:
    selector = element.name
    if element.get("id"):
        return f"{selector}#{element['id']}"
    classes = element.get("class") or []
    if classes:
        selector += "." + ".".join(classes[:2])
    return selector


def _has_accessible_name(element: Tag) -> bool:
    if element.get("aria-label", "").strip() or element.get("aria-labelledby"):
        return True
    if element.get("title", "").strip():
        return True
    if element.get_text(strip=True):
        return True
    return any(img.get("alt", "").strip() for img in element.find_all("img"))


def run_builtin_rules(html: str) -> tuple[dict[str, list[Tag]], int]:
    """
    Evaluate the built-in rule set against a DOM snapshot.

    Returns the failing elements per rule id and the number of rules that
    passed. Color contrast needs rendered styles and is not checked here.
    """
    soup = BeautifulSoup(html, "lxml")
    failures: dict[str, list[Tag]] = {rule: [] for rule in BUILTIN_RULES}

    failures["image-alt"] = [
        img for img in soup.find_all("img") if img.get("alt") is None and img.get("role") != "presentation"
    ]

    html_tag = soup.find("html")
    if html_tag is not None and not html_tag.get("lang", "").strip():
        failures["html-has-lang"] = [html_tag]

    title = soup.find("title")
    if title is None or not title.get_text(strip=True):
        failures["document-title"] = [html_tag] if html_tag is not None else []

    labelled = {label.get("for") for label in soup.find_all("label") if label.get("for")}
    for field in soup.find_all(["input", "select", "textarea"]):
        if field.name == "input" and field.get("type", "text").lower() in UNLABELLED_INPUT_TYPES:
            continue
        if field.get("id") in labelled or field.find_parent("label") is not None:
            continue
        if field.get("aria-label", "").strip() or field.get("aria-labelledby") or field.get("title"):
            continue
        failures["label"].append(field)

    failures["button-name"] = [
        button
        for button in soup.find_all("button")
        if not _has_accessible_name(button) and not button.get("value")
    ]
    failures["link-name"] = [
        link for link in soup.find_all("a", href=True) if not _has_accessible_name(link)
    ]
    failures["frame-title"] = [
        frame
        for frame in soup.find_all(["iframe", "frame"])
        if not frame.get("title", "").strip() and not frame.get("aria-label")
    ]

    for element in soup.find_all(True):
        role = element.get("role")
        if role and not all(r in VALID_ROLES for r in role.split()):
            failures["aria-roles"].append(element)
        if any(
            attr.startswith("aria-") and attr not in VALID_ARIA_ATTRIBUTES for attr in element.attrs
        ):
            failures["aria-valid-attr"].append(element)
        tabindex = element.get("tabindex")
        if tabindex and tabindex.strip().lstrip("-").isdigit() and int(tabindex) > 0:
            failures["tabindex"].append(element)

    viewport = soup.find("meta", attrs={"name": "viewport"})
    if viewport is not None:
        content = viewport.get("content", "").replace(" ", "").lower()
        if "user-scalable=no" in content or "user-scalable=0" in content:
            failures["meta-viewport"] = [viewport]
        else:
            for part in content.split(","):
                if part.startswith("maximum-scale="):
                    try:
                        if float(part.split("=", 1)[1]) < 2:
                            failures["meta-viewport"] = [viewport]
                    except ValueError:
                        pass

    previous = 0
    for heading in soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6"]):
        level = int(heading.name[1])
        if previous and level > previous + 1:
            failures["heading-order"].append(heading)
        previous = level

    passes = sum(1 for elements in failures.values() if not elements)
    return {rule: elements for rule, elements in failures.items() if elements}, passes


class AccessibilityAnalyzer(BaseAnalyzer):
    """
    Checks the page against WCAG rules.

    With an axe-core script configured the script is injected into the page
    and its violations are used as-is. Otherwise a built-in rule set runs
    over the serialized DOM.
    """

    kind = AnalyzerKind.PAGE
    writes = frozenset({slots.ACCESSIBILITY})

    def __init__(self, axe_script_path: str | None = None):
        self.axe_script_path = axe_script_path

    @property
    def name(self) -> str:
        return "accessibility"

    async def run(self, ctx) -> None:
        if self.axe_script_path:
            result = await self._run_axe(ctx.page)
        else:
            result = self._run_builtin(await ctx.page.content())

        logger.info(
            f"{ctx.url}: {len(result.violations)} accessibility violations ({result.engine})"
        )
        ctx.set(slots.ACCESSIBILITY, result)

    async def _run_axe(self, page) -> AccessibilityResult:
        if not Path(self.axe_script_path).is_file():
            raise AnalyzerError(f"axe-core script not found at {self.axe_script_path}")

        await page.add_script(self.axe_script_path)
        data = await page.evaluate(AXE_SCRIPT)

        return AccessibilityResult(
            engine="axe-core",
            violations=[Violation(**violation) for violation in data["violations"]],
            passes=data.get("passes", 0),
            rules_checked=sorted(set(data.get("rules", []))),
        )

    def _run_builtin(self, html: str) -> AccessibilityResult:
        failures, passes = run_builtin_rules(html)

        violations = []
        for rule_id, elements in failures.items():
            impact, help_text, tags = BUILTIN_RULES[rule_id]
            violations.append(
                Violation(
                    id=rule_id,
                    impact=impact,
                    help=help_text,
                    help_url=f"https://dequeuniversity.com/rules/axe/4.8/{rule_id}",
                    tags=list(tags),
                    nodes=len(elements),
                    targets=[_selector(element) for element in elements[:5]],
                )
            )

        return AccessibilityResult(
            engine="builtin",
            violations=violations,
            passes=passes,
            rules_checked=sorted(BUILTIN_RULES),
        )
