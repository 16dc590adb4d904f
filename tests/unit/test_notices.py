from src.nm_common.enums import NoticeLevel
from src.nm_common.notices import CATALOG_NOTICE_ID, NoticeBoard


class TestNoticeBoard:
    def test_later_notice_replaces_earlier(self) -> None:
        board = NoticeBoard()
        board.loading("buy", "Processing purchase...")
        board.success("buy", "Purchase successful!", points_earned=5)
        assert len(board.active()) == 1
        notice = board.get("buy")
        assert notice.level == NoticeLevel.SUCCESS
        assert notice.detail == {"points_earned": 5}

    def test_independent_operations_stack(self) -> None:
        board = NoticeBoard()
        board.error(CATALOG_NOTICE_ID, "Failed to load listings")
        board.loading("bid", "Placing bid...")
        assert [n.operation_id for n in board.active()] == [CATALOG_NOTICE_ID, "bid"]

    def test_dismiss(self) -> None:
        board = NoticeBoard()
        board.error("end", "Failed to end auction")
        assert board.dismiss("end")
        assert board.get("end") is None
        assert not board.dismiss("end")
