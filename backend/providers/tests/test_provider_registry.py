from django.test import SimpleTestCase

from providers.registry import FAMILIES, get_family


class FamilyRegistryTests(SimpleTestCase):
    def test_known_families_exist(self):
        for name in ("path-tmdb", "path-imdb", "query-tmdb", "videoid-tmdb"):
            family = get_family(name)
            self.assertEqual(family.name, name)

    def test_only_imdb_family_uses_alternate_id(self):
        flagged = [name for name, entry in FAMILIES.items() if entry.uses_alternate_id]
        self.assertEqual(flagged, ["path-imdb"])

    def test_unknown_family_raises(self):
        with self.assertRaises(ValueError):
            get_family("unknown")
