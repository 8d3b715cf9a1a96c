"""
Fuzzy association of free-text driver names with driver master records.

Scores combine per-component comparison (first names with nickname
awareness, last names), whole-string similarity and token overlap. Results
are bucketed into confident matches, candidates needing review and
unmatched names, so low-confidence pairs are surfaced rather than dropped.
"""
from difflib import SequenceMatcher
from typing import Dict, List, Optional, Set, Tuple
import re

from tankalert.schemas.association import MatchCandidate, NameMatch, MatchReport

NICKNAMES: Dict[str, List[str]] = {
    'Michael': ['Mike', 'Mick', 'Mickey'],
    'William': ['Bill', 'Will', 'Billy', 'Willie'],
    'James': ['Jim', 'Jimmy', 'Jamie'],
    'Robert': ['Rob', 'Bob', 'Bobby', 'Robbie'],
    'Richard': ['Rick', 'Rich', 'Ricky', 'Dick'],
    'David': ['Dave', 'Davey'],
    'Christopher': ['Chris', 'Kris'],
    'Matthew': ['Matt', 'Matty'],
    'Andrew': ['Andy', 'Drew'],
    'Joseph': ['Joe', 'Joey'],
    'Daniel': ['Dan', 'Danny'],
    'Anthony': ['Tony'],
    'Steven': ['Steve', 'Stevie'],
    'Stephen': ['Steve', 'Stevie'],
    'Kenneth': ['Ken', 'Kenny'],
    'Joshua': ['Josh'],
    'Edward': ['Ed', 'Eddie', 'Ted'],
    'Ronald': ['Ron', 'Ronnie'],
    'Timothy': ['Tim', 'Timmy'],
    'Jeffrey': ['Jeff'],
    'Jacob': ['Jake'],
    'Nicholas': ['Nick', 'Nicky'],
    'Jonathan': ['Jon', 'Johnny'],
    'Benjamin': ['Ben', 'Benny'],
    'Samuel': ['Sam', 'Sammy'],
    'Gregory': ['Greg'],
    'Raymond': ['Ray'],
    'Alexander': ['Alex', 'Al'],
    'Patrick': ['Pat', 'Paddy'],
    'Henry': ['Hank', 'Harry'],
    'Douglas': ['Doug'],
    'Nathan': ['Nate'],
    'Peter': ['Pete'],
    'Zachary': ['Zach', 'Zack'],
    'Walter': ['Walt'],
    'Gerald': ['Gerry', 'Jerry'],
    'Lawrence': ['Larry'],
    'Philip': ['Phil'],
    'Louis': ['Lou', 'Louie'],
    'Eugene': ['Gene'],
    'Albert': ['Al', 'Bert'],
}

SUFFIXES = {'jr', 'sr', 'ii', 'iii', 'iv'}


def _build_nickname_index() -> Dict[str, Set[str]]:
    index: Dict[str, Set[str]] = {}
    for full, nicks in NICKNAMES.items():
        for name in [full] + nicks:
            index.setdefault(name.lower(), set()).add(full.lower())
    return index


_NICKNAME_INDEX = _build_nickname_index()


def normalize_name(name: Optional[str]) -> str:
    """Collapse whitespace, drop punctuation other than ' - and , and title-case each word."""
    if not name:
        return ""
    cleaned = re.sub(r"[^\w\s',-]", "", name.strip())
    cleaned = re.sub(r"\s*,\s*", ", ", cleaned)
    words = [w for w in cleaned.split() if w]
    return " ".join("-".join(p[:1].upper() + p[1:].lower() for p in w.split("-")) for w in words)


def split_name(name: Optional[str]) -> Tuple[str, str, str]:
    """(first, middle, last). Handles "First Last", "First Middle Last" and "Last, First"."""
    normalized = normalize_name(name)
    if not normalized:
        return "", "", ""

    if "," in normalized:
        last, rest = [p.strip() for p in normalized.split(",", 1)]
        parts = [p for p in rest.replace(",", " ").split() if p.lower().rstrip(".") not in SUFFIXES]
        if not parts:
            return last, "", ""
        return parts[0], " ".join(parts[1:]), last

    parts = [p for p in normalized.split() if p.lower().rstrip(".") not in SUFFIXES]
    if not parts:
        return "", "", ""
    if len(parts) == 1:
        return parts[0], "", ""
    return parts[0], " ".join(parts[1:-1]), parts[-1]


def canonical_name(name: Optional[str]) -> str:
    first, _, last = split_name(name)
    return " ".join(p for p in (first, last) if p).lower()


def is_nickname_of(a: str, b: str) -> bool:
    groups_a = _NICKNAME_INDEX.get(a.lower(), set())
    groups_b = _NICKNAME_INDEX.get(b.lower(), set())
    return bool(groups_a & groups_b)


def _ratio(a: str, b: str) -> float:
    if not a and not b:
        return 1.0
    return SequenceMatcher(None, a.lower(), b.lower()).ratio()


def _token_overlap(a: str, b: str) -> float:
    tokens_a = set(a.split())
    tokens_b = set(b.split())
    union = tokens_a | tokens_b
    return len(tokens_a & tokens_b) / len(union) if union else 0.0


def name_similarity(a: Optional[str], b: Optional[str]) -> float:
    """Similarity in [0, 1]; 1.0 when both names reduce to the same first and last name."""
    norm_a = canonical_name(a)
    norm_b = canonical_name(b)
    if not norm_a or not norm_b:
        return 0.0
    if norm_a == norm_b:
        return 1.0

    first_a, _, last_a = split_name(a)
    first_b, _, last_b = split_name(b)

    score = 0.0
    components = 0
    if first_a and first_b:
        components += 1
        if first_a.lower() == first_b.lower():
            score += 1.0
        elif is_nickname_of(first_a, first_b):
            score += 0.8
        else:
            score += _ratio(first_a, first_b) * 0.5
    if last_a and last_b:
        components += 1
        if last_a.lower() == last_b.lower():
            score += 1.0
        else:
            score += _ratio(last_a, last_b) * 0.7

    component_avg = score / components if components else 0.0
    overall = _ratio(norm_a, norm_b)
    tokens = _token_overlap(norm_a, norm_b)

    combined = max(
        component_avg * 0.6 + overall * 0.2 + tokens * 0.2,
        max(component_avg, overall, tokens) * 0.8,
    )
    return round(min(1.0, combined), 3)


def _ranked(source: MatchCandidate, targets: List[MatchCandidate]) -> List[Tuple[float, MatchCandidate]]:
    scored = [(name_similarity(source.name, t.name), t) for t in targets]
    return sorted(scored, key=lambda pair: (-pair[0], pair[1].key))


def _result(source: MatchCandidate, confidence: float, target: Optional[MatchCandidate],
            alternatives: List[Tuple[str, float]]) -> NameMatch:
    return NameMatch(
        source_key=source.key,
        source_name=source.name,
        target_key=target.key if target else None,
        target_name=target.name if target else None,
        confidence=confidence,
        alternatives=alternatives,
    )


def match_records(
    sources: List[MatchCandidate],
    targets: List[MatchCandidate],
    threshold: float = 0.8,
    review_threshold: float = 0.6,
    exclusive: bool = False,
) -> MatchReport:
    """
    Match each source name to the best target.

    Confidence >= threshold goes to matches, >= review_threshold to review,
    anything else (including blank names) to unmatched. With exclusive=True
    each target is used at most once, assigned greedily by confidence.
    """
    if review_threshold > threshold:
        raise ValueError("review_threshold cannot exceed threshold")

    ranked = {s.key: _ranked(s, targets) for s in sources if canonical_name(s.name)}

    matches: List[NameMatch] = []
    review: List[NameMatch] = []
    unmatched: List[NameMatch] = []

    def alternatives_for(key: str, chosen: Optional[MatchCandidate]) -> List[Tuple[str, float]]:
        return [
            (t.key, score) for score, t in ranked.get(key, [])
            if score >= review_threshold and (chosen is None or t.key != chosen.key)
        ][:3]

    assigned: Dict[str, Tuple[float, MatchCandidate]] = {}
    if exclusive:
        pairs = [
            (score, s.key, t) for s in sources for score, t in ranked.get(s.key, [])
            if score >= review_threshold
        ]
        pairs.sort(key=lambda p: (-p[0], p[1], p[2].key))
        used_targets: Set[str] = set()
        for score, source_key, target in pairs:
            if source_key in assigned or target.key in used_targets:
                continue
            assigned[source_key] = (score, target)
            used_targets.add(target.key)
    else:
        for source_key, scored in ranked.items():
            if scored and scored[0][0] >= review_threshold:
                assigned[source_key] = scored[0]

    for source in sources:
        if source.key in assigned:
            score, target = assigned[source.key]
            result = _result(source, score, target, alternatives_for(source.key, target))
            (matches if score >= threshold else review).append(result)
        else:
            scored = ranked.get(source.key, [])
            best = scored[0][0] if scored else 0.0
            unmatched.append(_result(source, best, None, alternatives_for(source.key, None)))

    return MatchReport(matches=matches, review=review, unmatched=unmatched)


def normalize_registration(registration: Optional[str]) -> str:
    if not registration:
        return ""
    return re.sub(r"[\s\-.]", "", registration).upper()
