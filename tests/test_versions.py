"""
Unit tests for the versions module.

Tests version-sort ordering, version families and the next-version search.
"""

import unittest

from custom_kernel.versions import (
    compare_kernel_versions,
    sort_kernel_versions,
    version_family_pattern,
    filter_family,
    find_next_version,
)


class TestCompareKernelVersions(unittest.TestCase):
    """Tests for compare_kernel_versions function."""
    
    def test_numeric_runs_compare_by_value(self):
        """Test that 9 sorts before 10."""
        self.assertEqual(compare_kernel_versions("6.9.9-generic", "6.9.10-generic"), -1)
        self.assertEqual(compare_kernel_versions("6.9.10-generic", "6.9.9-generic"), 1)
    
    def test_equal_versions(self):
        """Test comparison of identical strings."""
        self.assertEqual(compare_kernel_versions("6.9.3-76060903-generic", "6.9.3-76060903-generic"), 0)
    
    def test_text_runs_compare_lexically(self):
        """Test that flavors are ordered lexically."""
        self.assertEqual(compare_kernel_versions("6.9.3-generic", "6.9.3-lowlatency"), -1)
    
    def test_prefix_sorts_first(self):
        """Test that a strict prefix sorts before the longer string."""
        self.assertEqual(compare_kernel_versions("6.9", "6.9.1"), -1)
        self.assertEqual(compare_kernel_versions("6.9.1", "6.9"), 1)
    
    def test_digit_run_sorts_before_text_run(self):
        """Test ordering when a digit run meets a text run at the same position."""
        self.assertEqual(compare_kernel_versions("6.9", "linux-6.9"), -1)
        self.assertEqual(compare_kernel_versions("linux-6.9", "6.9"), 1)
    
    def test_leading_zeros_only_tie_on_identical_strings(self):
        """Test that numerically equal runs do not make different strings equal."""
        self.assertNotEqual(compare_kernel_versions("6.01", "6.1"), 0)
        self.assertEqual(
            compare_kernel_versions("6.01", "6.1"),
            -compare_kernel_versions("6.1", "6.01"),
        )
    
    def test_antisymmetry(self):
        """Test cmp(a, b) == -cmp(b, a) over a set of real versions."""
        versions = [
            "6.9.1-generic",
            "6.9.10-generic",
            "6.9.2-generic",
            "6.9.3-76060903-generic",
            "6.8.0-76060800daily20240311-generic",
            "5.15.0-82-lowlatency",
            "6.9",
        ]
        for a in versions:
            for b in versions:
                self.assertEqual(
                    compare_kernel_versions(a, b),
                    -compare_kernel_versions(b, a),
                    f"{a} vs {b}",
                )


class TestSortKernelVersions(unittest.TestCase):
    """Tests for sort_kernel_versions function."""
    
    def test_natural_sort(self):
        """Test that 6.9.10 sorts after 6.9.2."""
        result = sort_kernel_versions(["6.9.1-generic", "6.9.10-generic", "6.9.2-generic"])
        
        self.assertEqual(result, ["6.9.1-generic", "6.9.2-generic", "6.9.10-generic"])
    
    def test_sort_set(self):
        """Test sorting an unordered set."""
        result = sort_kernel_versions({"6.9.3-76060903-generic", "6.8.0-76060800-generic"})
        
        self.assertEqual(result, ["6.8.0-76060800-generic", "6.9.3-76060903-generic"])
    
    def test_sort_empty(self):
        """Test sorting nothing."""
        self.assertEqual(sort_kernel_versions([]), [])


class TestVersionFamilyPattern(unittest.TestCase):
    """Tests for version_family_pattern function."""
    
    def test_pattern_matches_same_structure(self):
        """Test that versions differing only in digits are in the family."""
        pattern = version_family_pattern("6.9.2-generic")
        
        self.assertTrue(pattern.fullmatch("6.9.10-generic"))
        self.assertTrue(pattern.fullmatch("7.0.1-generic"))
    
    def test_pattern_rejects_other_flavor(self):
        """Test that a different flavor is not in the family."""
        pattern = version_family_pattern("6.9.2-generic")
        
        self.assertIsNone(pattern.fullmatch("6.9.2-lowlatency"))
    
    def test_pattern_rejects_extra_fields(self):
        """Test that an extra numeric field changes the family."""
        pattern = version_family_pattern("6.9.2-generic")
        
        self.assertIsNone(pattern.fullmatch("6.9.2-76060902-generic"))
        self.assertIsNone(pattern.fullmatch("6.9-generic"))
    
    def test_dots_are_literal(self):
        """Test that '.' only matches a dot."""
        pattern = version_family_pattern("6.9.2-generic")
        
        self.assertIsNone(pattern.fullmatch("6x9x2-generic"))
    
    def test_digit_runs_are_wildcards(self):
        """Test the generated expression for a digit-only run."""
        pattern = version_family_pattern("42")
        
        self.assertEqual(pattern.pattern, "[0-9]+")


class TestFilterFamily(unittest.TestCase):
    """Tests for filter_family function."""
    
    def test_filter_and_sort(self):
        """Test that only family members are returned, in order."""
        available = {
            "6.9.10-76060910-generic",
            "6.9.3-76060903-generic",
            "6.9.3-generic",
            "6.8.0-76060800-lowlatency",
        }
        
        result = filter_family(available, "6.9.3-76060903-generic")
        
        self.assertEqual(result, ["6.9.3-76060903-generic", "6.9.10-76060910-generic"])


class TestFindNextVersion(unittest.TestCase):
    """Tests for find_next_version function."""
    
    def setUp(self):
        """Set up test inventory."""
        self.available = {"6.9.1-generic", "6.9.2-generic", "6.9.10-generic"}
    
    def test_next_version(self):
        """Test finding the next version after the current one."""
        self.assertEqual(find_next_version(self.available, "6.9.2-generic"), "6.9.10-generic")
    
    def test_next_version_skips_one_step_only(self):
        """Test that only the immediate successor is returned."""
        self.assertEqual(find_next_version(self.available, "6.9.1-generic"), "6.9.2-generic")
    
    def test_already_newest(self):
        """Test that the newest version has no successor."""
        self.assertIsNone(find_next_version(self.available, "6.9.10-generic"))
    
    def test_current_not_installed(self):
        """Test that a current version missing from the inventory yields None."""
        self.assertIsNone(find_next_version(self.available, "6.9.5-generic"))
    
    def test_empty_inventory(self):
        """Test search in an empty inventory."""
        self.assertIsNone(find_next_version(set(), "6.9.2-generic"))
    
    def test_family_matching_is_structural(self):
        """Test that a new major release with the same structure is the next kernel."""
        available = {"6.9.2-generic", "7.0.1-generic"}
        
        self.assertEqual(find_next_version(available, "6.9.2-generic"), "7.0.1-generic")
    
    def test_other_flavor_ignored(self):
        """Test that kernels of another flavor are never the next kernel."""
        available = {"6.9.2-generic", "6.9.3-lowlatency"}
        
        self.assertIsNone(find_next_version(available, "6.9.2-generic"))
    
    def test_pop_os_versions(self):
        """Test with Pop!_OS style version strings."""
        available = {
            "6.8.0-76060800daily20240311-generic",
            "6.9.3-76060903-generic",
            "6.10.6-76061006-generic",
        }
        
        self.assertEqual(
            find_next_version(available, "6.9.3-76060903-generic"),
            "6.10.6-76061006-generic",
        )


if __name__ == "__main__":
    unittest.main()
