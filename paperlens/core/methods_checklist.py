"""
Methods checklist - keyword inference of approach, design, tools and analysis
"""
from __future__ import annotations

import re
from typing import Iterable, List

from .models import MethodsChecklist
from .text_normalizer import normalize


QUANTITATIVE = re.compile(
    r"\b(quantitative|statistical|numerical|experiment|survey|measurement|anova|regression|"
    r"t[- ]?test|pca|svm|spm1d|chi[- ]?square|pearson|spearman)\b"
)
QUALITATIVE = re.compile(
    r"\b(qualitative|phenomenological|thematic|interview|focus group|content analysis|"
    r"narrative|case study|grounded theory)\b"
)
MIXED = re.compile(r"\bmixed[- ]?methods?\b")

DESIGN = re.compile(
    r"\b(experimental|quasi[- ]?experimental|descriptive|correlational|comparative|observational|"
    r"phenomenological|survey|case[- ]?study|developmental|design[- ]?based|prototype|simulation|"
    r"hardware testing|usability|iot|automation)\b"
)
ENVIRONMENT = re.compile(
    r"\b(school|laboratory|farm|field|garden|community|classroom|simulation|prototype|testing|"
    r"home|urban|rural)\b"
)
INSTRUMENTS = re.compile(
    r"\b(questionnaire|sensor|arduino|esp8266|hx711|mlx90393|force plate|camera|dht11|"
    r"soil moisture|relay|ph sensor|lcd|survey form|interview guide|observation sheet|"
    r"data logger|fusion 360|ansys|simulation|excel|solar panel|humidity sensor|transmitter|"
    r"microcontroller)\b"
)
SOFTWARE = re.compile(
    r"\b(excel|spss|python|matlab|arduino ide|adafruit|thinger|io|blynk|cloud|web app|"
    r"iot platform|mobile app|firebase|node[- ]?red)\b"
)
ANALYSIS = re.compile(
    r"\b(mean|t[- ]?test|anova|regression|correlation|descriptive|content analysis|thematic|"
    r"coding|trend|comparison|graphical|statistical|qualitative interpretation)\b"
)
OUTCOMES = re.compile(
    r"\b(growth|height|efficien\w*|performance|accuracy|speed|yield|output|temperature|humidity|"
    r"voltage|data|pressure|response|feedback)\b"
)

SAMPLE_N = re.compile(r"\bn\s*=\s*\d+")
SAMPLE_LABELLED = re.compile(
    r"\b(sample size|participants?|respondents?|subjects?|farmers?|students?)\s*[:=]?\s*\d+"
)

MAX_OUTCOMES = 5


class MethodsExtractor:
    """Infer a methods checklist from paper text"""

    def extract(self, text: str) -> MethodsChecklist:
        """
        Build a checklist of matched method terms

        Args:
            text: Abstract or full paper text

        Returns:
            MethodsChecklist holding only categories that matched
        """
        lower = normalize(text).lower()
        checklist = MethodsChecklist()
        if not lower:
            return checklist

        approach = self.detect_approach(lower)
        if approach:
            checklist.add("approach", [approach])

        checklist.add("design", self._dedup(self._find_all(DESIGN, lower)))
        checklist.add("environment", self._dedup(self._find_all(ENVIRONMENT, lower)))

        sample = self.detect_sample(lower)
        if sample:
            checklist.add("sample", [sample])

        checklist.add("instruments", self._dedup(self._find_all(INSTRUMENTS, lower)))
        software = [
            "IoT" if term.lower() == "io" else term
            for term in self._dedup(self._find_all(SOFTWARE, lower))
        ]
        checklist.add("software", self._dedup(software))
        checklist.add("analysis", self._dedup(self._find_all(ANALYSIS, lower)))
        checklist.add("outcomes", self._dedup(self._find_all(OUTCOMES, lower))[:MAX_OUTCOMES])
        return checklist

    def render(self, text: str) -> str:
        return self.extract(text).render()

    @staticmethod
    def detect_approach(lower: str) -> str:
        quantitative = bool(QUANTITATIVE.search(lower))
        qualitative = bool(QUALITATIVE.search(lower))
        if MIXED.search(lower) or (quantitative and qualitative):
            return "Mixed Methods"
        if quantitative:
            return "Quantitative"
        if qualitative:
            return "Qualitative"
        return ""

    @staticmethod
    def detect_sample(lower: str) -> str:
        match = SAMPLE_N.search(lower) or SAMPLE_LABELLED.search(lower)
        if not match:
            return ""
        sample = re.sub(r"\s+", " ", match.group(0))
        return re.sub(r"\s*[:=]\s*", " = ", sample).strip()

    @staticmethod
    def _find_all(pattern: re.Pattern, lower: str) -> List[str]:
        return [match.group(0) for match in pattern.finditer(lower)]

    @staticmethod
    def _dedup(terms: Iterable[str]) -> List[str]:
        seen = set()
        output: List[str] = []
        for term in terms:
            key = term.strip().lower()
            if not key or key in seen:
                continue
            seen.add(key)
            clean = term.strip()
            output.append(clean[0].upper() + clean[1:])
        return output
