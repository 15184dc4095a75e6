"""
Tests for display field derivation.
"""

import pytest

from jobfeed.fields import (
    LOCATION_RULES,
    FieldRule,
    call_button_label,
    call_url,
    description_text,
    first_match,
    image_url,
    job_card,
    job_details,
    location,
    phone,
    detail_salary,
    salary,
    share_message,
    share_title,
    whatsapp_link,
)


class TestFirstMatch:
    def test_first_present_value_wins(self):
        rules = (
            FieldRule("a", lambda job: job.get("a")),
            FieldRule("b", lambda job: job.get("b")),
        )
        assert first_match({"a": "", "b": 7}, rules) == "7"
        assert first_match({"a": "x", "b": 7}, rules) == "x"
        assert first_match({}, rules) == "N/A"
        assert first_match({}, rules, fallback=None) is None

    def test_location_rule_order(self):
        assert [r.name for r in LOCATION_RULES] == ["primary_details.Place", "job_location_slug"]


class TestLocation:
    def test_place_first(self, full_job):
        assert location(full_job) == "Bengaluru"

    def test_slug_fallback(self):
        assert location({"id": 1, "primary_details": {"Place": ""}, "job_location_slug": "pune"}) == "pune"

    def test_not_available(self):
        assert location({"id": 1, "primary_details": "weird"}) == "N/A"


class TestSalary:
    def test_range_wins(self, full_job):
        assert salary(full_job) == "₹15000 - ₹20000"

    def test_zero_minimum_is_a_range(self):
        assert salary({"salary_min": 0, "salary_max": 9000}) == "₹0 - ₹9000"

    def test_text_fallback(self):
        assert salary({"salary_min": 1000, "primary_details": {"Salary": "₹8000"}}) == "₹8000"

    def test_dash_means_unknown(self):
        assert salary({"primary_details": {"Salary": "-"}}) == "N/A"

    def test_detail_view_uses_compact_range(self, full_job):
        assert detail_salary(full_job) == "₹15000-20000"
        assert job_details(full_job).salary == "₹15000-20000"
        assert job_card(full_job).salary == "₹15000 - ₹20000"

    def test_detail_view_text_fallback(self):
        assert detail_salary({"salary_max": 9000, "primary_details": {"Salary": "₹8000"}}) == "₹8000"
        assert detail_salary({"primary_details": {"Salary": "-"}}) == "N/A"

class TestPhone:
    def test_tel_link(self, full_job):
        assert phone(full_job) == "9876543210"
        assert call_url(full_job) == "tel:9876543210"

    def test_whatsapp_number_fallback(self):
        job = {"custom_link": "https://apply.example.com", "whatsapp_no": 9123456780}
        assert phone(job) == "9123456780"
        assert call_url(job) == "tel:9123456780"

    def test_empty_tel_link_falls_through(self):
        assert phone({"custom_link": "tel:", "whatsapp_no": "911"}) == "911"

    def test_no_number(self):
        assert phone({}) == "N/A"
        assert call_url({}) is None


class TestImage:
    def test_thumb_first(self, full_job):
        assert image_url(full_job) == "https://cdn.example.com/t.png"

    def test_file_fallback(self):
        assert image_url({"creatives": [{"file": "f.png"}, {"thumb_url": "later.png"}]}) == "f.png"

    @pytest.mark.parametrize("creatives", [None, [], [None], "x.png"])
    def test_missing(self, creatives):
        assert image_url({"creatives": creatives}) is None


class TestContactActions:
    def test_whatsapp_link(self, full_job):
        assert whatsapp_link(full_job) == "https://wa.me/919123456780"
        assert whatsapp_link({"contact_preference": None}) is None
        assert whatsapp_link({"contact_preference": {"whatsapp_link": ""}}) is None

    def test_call_label_uses_button_text(self, full_job):
        assert call_button_label(full_job) == "Call HR"

    def test_call_label_default(self):
        assert call_button_label({"whatsapp_no": "123", "button_text": "Apply"}) == "Call (123)"


class TestDescription:
    def test_markup_stripped(self, full_job):
        assert description_text(full_job) == "Deliver parcels across the city.\nBike required."

    def test_plain_text_kept(self):
        assert description_text({"other_details": "Line one\n\n  Line   two "}) == "Line one\nLine two"

    def test_missing(self):
        assert description_text({}) is None
        assert description_text({"other_details": "   "}) is None


class TestViews:
    def test_card(self, full_job):
        card = job_card(full_job)
        assert card.id == 4242
        assert card.title == "Delivery Executive"
        assert card.company == "Swift Couriers"
        assert card.phone == "9876543210"

    def test_card_defaults(self):
        card = job_card({"id": 1})
        assert card.title == "No Title"
        assert card.company == "N/A"
        assert card.salary == "N/A"
        assert card.image_url is None

    def test_details(self, full_job):
        details = job_details(full_job)
        assert details.job_role == "Delivery"
        assert details.experience == "Fresher"
        assert details.qualification == "10th Pass"
        assert details.call_label == "Call HR"
        assert details.whatsapp_link == "https://wa.me/919123456780"

    def test_details_defaults(self):
        details = job_details({"id": 1})
        assert details.title == "Job Title Not Available"
        assert details.call_url is None
        assert details.call_label is None
        assert details.description is None


class TestShareMessage:
    def test_full_message(self, full_job):
        assert share_message(full_job) == (
            "Check out this job opportunity:\n\n"
            "*Delivery Executive* at Swift Couriers\n"
            "Location: Bengaluru\n"
            "Salary: ₹15000-20000\n\n"
            "Contact: 9876543210"
        )

    def test_without_contact(self):
        message = share_message({"id": 1, "title": "Cook"})
        assert "*Cook* at N/A" in message
        assert message.endswith("Contact: See app for details")

    def test_title(self, full_job):
        assert share_title(full_job) == "Job Opportunity: Delivery Executive"
        assert share_title({"id": 1}) == "Job Opportunity: Job Title Not Available"
