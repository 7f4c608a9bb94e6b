import pytest

from wayfarer.domain.models.common import UserRole, UserStatus
from wayfarer.domain.models.report import ReportStatus
from wayfarer.domain.result import ErrorCode

REASON = "Opening hours are completely wrong"


@pytest.fixture
async def region(make_region, editor):
    return await make_region(editor)


def _report(entity_type, entity_id, **fields):
    return {"entity_type": entity_type, "entity_id": entity_id, "type": "false_information",
            "reason": REASON, **fields}


async def test_report_flags_region_and_notifies_active_admins(report_service, context, email_service,
                                                              region, visitor, admin, make_user):
    await make_user(UserRole.ADMIN, status=UserStatus.SUSPENDED, name="Sleeping Admin")

    report = (await report_service.create_report(visitor.id, _report("region", region.id))).unwrap()

    assert report.status == ReportStatus.PENDING
    assert report.reason == REASON
    assert (await context.regions.find_by_id(region.id)).is_reported
    assert [mail.to for mail in email_service.sent] == [admin.email]
    assert email_service.sent[0].subject == "New false_information report on a region"


async def test_report_reason_is_checked_after_trimming(report_service, region, visitor):
    too_short = await report_service.create_report(visitor.id, _report("region", region.id, reason="bad"))
    padded = await report_service.create_report(
        visitor.id, _report("region", region.id, reason="    bad spot    "),
    )

    assert too_short.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert padded.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert padded.unwrap_err().message.startswith("Reason must be between 10")


async def test_report_unknown_or_own_content(report_service, region, editor, visitor):
    missing = await report_service.create_report(visitor.id, _report("place", "missing"))
    own = await report_service.create_report(editor.id, _report("region", region.id))
    self_report = await report_service.create_report(visitor.id, _report("user", visitor.id))

    assert missing.unwrap_err().code == ErrorCode.NOT_FOUND
    assert missing.unwrap_err().message == "Place 'missing' not found"
    assert own.unwrap_err().message == "You cannot report your own content"
    assert self_report.unwrap_err().message == "You cannot report your own content"


async def test_duplicate_report_conflicts(report_service, region, visitor):
    await report_service.create_report(visitor.id, _report("region", region.id))

    again = await report_service.create_report(visitor.id, _report("region", region.id, type="spam"))

    assert again.unwrap_err().code == ErrorCode.CONFLICT
    assert again.unwrap_err().message == "You have already reported this content"


async def test_report_a_user(report_service, editor, visitor):
    report = (await report_service.create_report(
        visitor.id, _report("user", editor.id, type="harassment"),
    )).unwrap()

    assert report.entity_id == editor.id


async def test_review_workflow_clears_flag_when_last_report_closes(report_service, context, region,
                                                                   visitor, make_user, admin):
    second_reporter = await make_user(name="Second Reporter")
    first = (await report_service.create_report(visitor.id, _report("region", region.id))).unwrap()
    second = (await report_service.create_report(second_reporter.id, _report("region", region.id))).unwrap()

    for report in (first, second):
        await report_service.mark_report_under_review(admin.id, report.id)

    resolved = (await report_service.review_report(admin.id, first.id, {
        "status": "resolved", "review_notes": "Hours corrected",
    })).unwrap()

    assert resolved.reviewed_by == admin.id
    assert resolved.review_notes == "Hours corrected"
    assert resolved.reviewed_at is not None
    assert (await context.regions.find_by_id(region.id)).is_reported

    await report_service.review_report(admin.id, second.id, {"status": "dismissed"})

    assert not (await context.regions.find_by_id(region.id)).is_reported


async def test_review_transitions_are_strict(report_service, region, visitor, admin):
    report = (await report_service.create_report(visitor.id, _report("region", region.id))).unwrap()

    skip = await report_service.review_report(admin.id, report.id, {"status": "resolved"})
    await report_service.mark_report_under_review(admin.id, report.id)
    twice = await report_service.mark_report_under_review(admin.id, report.id)
    await report_service.review_report(admin.id, report.id, {"status": "dismissed"})
    reopen = await report_service.review_report(admin.id, report.id, {"status": "resolved"})

    assert skip.unwrap_err().code == ErrorCode.INVALID_TRANSITION
    assert twice.unwrap_err().code == ErrorCode.INVALID_TRANSITION
    assert reopen.unwrap_err().code == ErrorCode.INVALID_TRANSITION


async def test_review_requires_admin(report_service, region, visitor, editor):
    report = (await report_service.create_report(visitor.id, _report("region", region.id))).unwrap()

    result = await report_service.mark_report_under_review(editor.id, report.id)
    missing = await report_service.mark_report_under_review("ghost", report.id)

    assert result.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED
    assert result.unwrap_err().message == "Insufficient permissions: admin role required"
    assert missing.unwrap_err().code == ErrorCode.NOT_FOUND


async def test_admin_listing_and_entity_reports(report_service, region, editor, visitor, admin):
    await report_service.create_report(visitor.id, _report("region", region.id))
    await report_service.create_report(visitor.id, _report("user", editor.id, type="spam"))

    spam = (await report_service.admin_list_reports(admin.id, {"type": "spam"})).unwrap()
    by_region = (await report_service.get_entity_reports(admin.id, "region", region.id)).unwrap()
    invalid = await report_service.get_entity_reports(admin.id, "planet", region.id)
    as_visitor = await report_service.admin_list_reports(visitor.id)

    assert [r.entity_id for r in spam.items] == [editor.id]
    assert [r.entity_id for r in by_region] == [region.id]
    assert invalid.unwrap_err().code == ErrorCode.VALIDATION_ERROR
    assert as_visitor.unwrap_err().code == ErrorCode.PERMISSION_REQUIRED


async def test_report_statistics(report_service, region, editor, visitor, admin):
    first = (await report_service.create_report(visitor.id, _report("region", region.id))).unwrap()
    await report_service.create_report(visitor.id, _report("user", editor.id, type="spam"))
    await report_service.mark_report_under_review(admin.id, first.id)

    stats = (await report_service.get_report_statistics(admin.id)).unwrap()

    assert stats.total_reports == 2
    assert stats.pending_reports == 1
    assert stats.under_review_reports == 1
    assert stats.reports_this_week == 2
    assert {entry["type"] for entry in stats.top_report_types} == {"false_information", "spam"}


async def test_my_reports_lists_only_own(report_service, region, editor, visitor, make_user):
    other = await make_user()
    await report_service.create_report(visitor.id, _report("region", region.id))
    await report_service.create_report(other.id, _report("region", region.id))
    await report_service.create_report(visitor.id, _report("user", editor.id, type="harassment"))

    mine = (await report_service.get_my_reports(visitor.id)).unwrap()
    ghost = await report_service.get_my_reports("ghost")

    assert sorted(report.entity_type.value for report in mine) == ["region", "user"]
    assert all(report.reporter_user_id == visitor.id for report in mine)
    assert ghost.unwrap_err().code == ErrorCode.NOT_FOUND
