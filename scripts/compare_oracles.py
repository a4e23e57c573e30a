"""List candidates where the probing oracle and a complete oracle disagree."""
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from wordgrid.dictionary import ProbeOracle, RangeOracle, load_dictionary
from wordgrid.settings import settings

dict_path = Path(sys.argv[1]) if len(sys.argv) > 1 else settings.DICTIONARY_PATH
dictionary = load_dictionary(dict_path)
probe = ProbeOracle(dictionary)
complete = RangeOracle(dictionary)

# Every word and every proper prefix of a word is worth checking
candidates = set()
for word in dictionary:
    for end in range(1, len(word) + 1):
        candidates.add(word[:end])

disagreements = []
for candidate in sorted(candidates):
    expected = complete.classify(candidate)
    got = probe.classify(candidate)
    if got is not expected:
        disagreements.append((candidate, expected.value, got.value))

print(f"Dictionary: {len(dictionary)} words, {len(candidates)} candidates")
print(f"Total disagreements: {len(disagreements)}")
print()
for candidate, expected, got in disagreements:
    print(f"  {candidate!r} expected={expected} probe={got}")
