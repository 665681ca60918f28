"""Unit tests for Reply and ReplyStatus."""

import pytest
from pydantic import ValidationError

from ts3query.errors import AdapterError, ServerQueryError
from ts3query.protocol.reply import Reply, ReplyStatus


class TestReplyStatus:
    """Test status line parsing."""

    def test_success(self):
        status = ReplyStatus.parse("error id=0 msg=ok")

        assert status.id == 0
        assert status.msg == "ok"
        assert status.is_success is True
        assert status.failed_permid is None

    def test_failure_with_escaped_message(self):
        status = ReplyStatus.parse("error id=1024 msg=invalid\\sserverID")

        assert status.id == 1024
        assert status.msg == "invalid serverID"
        assert status.is_success is False

    def test_failed_permission(self):
        status = ReplyStatus.parse("error id=2568 msg=insufficient\\sclient\\spermissions failed_permid=4")

        assert status.failed_permid == 4

    def test_extra_message(self):
        status = ReplyStatus.parse("error id=1538 msg=invalid\\sparameter extra_msg=sid\\smissing")

        assert status.extra_msg == "sid missing"

    def test_not_a_status_line(self):
        with pytest.raises(AdapterError):
            ReplyStatus.parse("virtualserver_id=1")


class TestReplyConstruction:
    """Test Reply.from_lines()."""

    def test_success_keeps_all_lines(self):
        reply = Reply.from_lines(["name=x", "error id=0 msg=ok"], "whoami")

        assert reply.lines == ("name=x", "error id=0 msg=ok")
        assert reply.command == "whoami"
        assert reply.is_success is True

    def test_failure_raises_by_default(self):
        with pytest.raises(ServerQueryError) as exc_info:
            Reply.from_lines(["error id=1 msg=invalid"], "use sid=99")

        assert exc_info.value.code == 1
        assert exc_info.value.message == "invalid"

    def test_failure_without_raise(self):
        reply = Reply.from_lines(["error id=1 msg=invalid"], "use sid=99", raise_on_error=False)

        assert reply.is_success is False
        assert reply.status.id == 1
        assert reply.status.msg == "invalid"

    def test_empty_lines(self):
        with pytest.raises(AdapterError):
            Reply.from_lines([], "version")

    def test_host_is_carried(self):
        host = object()
        reply = Reply.from_lines(["error id=0 msg=ok"], "quit", host=host)

        assert reply.host is host

    def test_immutable(self):
        reply = Reply.from_lines(["error id=0 msg=ok"], "quit")

        with pytest.raises(ValidationError):
            reply.command = "other"

    def test_to_error(self):
        reply = Reply.from_lines(
            ["error id=2568 msg=insufficient\\sclient\\spermissions failed_permid=4"],
            "serverlist",
            raise_on_error=False,
        )
        error = reply.to_error()

        assert isinstance(error, ServerQueryError)
        assert error.code == 2568
        assert error.failed_permid == 4


class TestReplyData:
    """Test data helpers."""

    LINES = [
        "virtualserver_id=1 virtualserver_port=9987 virtualserver_name=Main\\sServer"
        "|virtualserver_id=2 virtualserver_port=9988 virtualserver_name=Second",
        "error id=0 msg=ok",
    ]

    def test_to_list(self):
        reply = Reply.from_lines(self.LINES, "serverlist")

        records = reply.to_list()
        assert len(records) == 2
        assert records[0]["virtualserver_name"] == "Main Server"
        assert records[1]["virtualserver_port"] == "9988"

    def test_to_dict(self):
        reply = Reply.from_lines(self.LINES, "serverlist")

        by_port = reply.to_dict("virtualserver_port")
        assert set(by_port) == {"9987", "9988"}
        assert by_port["9988"]["virtualserver_id"] == "2"

    def test_to_info(self):
        reply = Reply.from_lines(self.LINES, "serverlist")

        assert reply.to_info()["virtualserver_id"] == "1"

    def test_to_info_without_data(self):
        reply = Reply.from_lines(["error id=0 msg=ok"], "use sid=1")

        assert reply.to_info() == {}
        assert reply.to_list() == []
        assert reply.to_text() == ""

    def test_to_text_and_lines(self):
        reply = Reply.from_lines(["a=1", "b=2", "error id=0 msg=ok"], "x")

        assert reply.to_lines() == ["a=1", "b=2"]
        assert reply.to_text() == "a=1\nb=2"

    def test_notifications_split_out(self):
        reply = Reply.from_lines(
            ["notifytextmessage targetmode=3 msg=hi", "version=3.13.7", "error id=0 msg=ok"],
            "version",
        )

        assert reply.notifications == ["notifytextmessage targetmode=3 msg=hi"]
        assert reply.body == ["version=3.13.7"]

    def test_welcome_banner_ignored(self):
        reply = Reply.from_lines(
            [
                "Welcome to the TeamSpeak 3 ServerQuery interface, type \"help\" for a list of commands.",
                "",
                "error id=0 msg=ok",
            ],
            "login client_login_name=a client_login_password=b",
        )

        assert reply.body == []
