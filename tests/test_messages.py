import unittest

from tests.base import APITestCase, PNG_SIGNATURE


class MessageTestCase(APITestCase):

    def send(self, type="TOOLBOX_TALK", priority="HIGH", recipients=("employee",), subject="Manual Handling"):
        response = self.post("/messages/", "manager", json={
            "type": type,
            "subject": subject,
            "body": "Bend your knees, not your back.",
            "priority": priority,
            "recipient_ids": [self.users[who] for who in recipients],
        })
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()


class TestSending(MessageTestCase):

    def test_create_message(self):
        message = self.send(recipients=("employee", "employee2", "employee"))
        self.assertEqual(message["type"], "TOOLBOX_TALK")
        self.assertEqual(message["sender_id"], self.users["manager"])
        self.assertEqual(message["created_via"], "web")
        self.assertEqual(len(message["recipients"]), 2)
        self.assertTrue(all(r["status"] == "PENDING" for r in message["recipients"]))

    def test_only_managers_send(self):
        response = self.post("/messages/", "employee", json={
            "type": "REMINDER", "subject": "x", "body": "y", "recipient_ids": [self.users["employee2"]],
        })
        self.assertEqual(response.status_code, 403)
        self.assertEqual(self.get("/messages/", "employee").status_code, 403)

    def test_validation(self):
        no_recipients = self.post("/messages/", "manager", json={
            "type": "REMINDER", "subject": "Check in", "body": "Please", "recipient_ids": [],
        })
        self.assertEqual(no_recipients.status_code, 400)

        blank_subject = self.post("/messages/", "manager", json={
            "type": "REMINDER", "subject": " ", "body": "Please", "recipient_ids": [self.users["employee"]],
        })
        self.assertEqual(blank_subject.json()["error"], "Subject is required")

        bad_type = self.post("/messages/", "manager", json={
            "type": "MEMO", "subject": "x", "body": "y", "recipient_ids": [self.users["employee"]],
        })
        self.assertEqual(bad_type.status_code, 400)

    def test_sent_list_filters_by_type(self):
        self.send()
        self.send(type="REMINDER", priority="LOW", subject="Timesheets due")
        self.assertEqual(len(self.get("/messages/", "manager").json()), 2)
        reminders = self.get("/messages/", "manager", params={"type": "REMINDER"}).json()
        self.assertEqual([m["subject"] for m in reminders], ["Timesheets due"])


class TestInbox(MessageTestCase):

    def test_high_priority_first(self):
        self.send(type="REMINDER", priority="LOW", subject="Low one")
        self.send(priority="HIGH", subject="High one")
        self.send(type="REMINDER", priority="LOW", subject="Low two")

        inbox = self.get("/messages/inbox", "employee").json()
        self.assertEqual([m["subject"] for m in inbox], ["High one", "Low two", "Low one"])
        self.assertEqual(inbox[0]["sender_name"], "Mark Manager")
        self.assertEqual(self.get("/messages/inbox", "employee2").json(), [])

    def test_shown(self):
        message = self.send()
        response = self.post(f"/messages/{message['id']}/shown", "employee")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "SHOWN")
        first_shown = response.json()["first_shown_at"]

        again = self.post(f"/messages/{message['id']}/shown", "employee")
        self.assertEqual(again.json()["first_shown_at"][:19], first_shown[:19])
        # Shown messages stay in the inbox until signed
        self.assertEqual(len(self.get("/messages/inbox", "employee").json()), 1)

        self.assertEqual(self.post(f"/messages/{message['id']}/shown", "employee2").status_code, 404)

    def test_sign_toolbox_talk(self):
        message = self.send()
        path = f"/messages/{message['id']}"
        self.assertEqual(self.post(f"{path}/dismiss", "employee").json()["error"],
                         "Toolbox talks must be signed, not dismissed")
        self.assertEqual(self.post(f"{path}/sign", "employee", json={"signature_data": ""}).status_code, 400)

        signed = self.post(f"{path}/sign", "employee", json={"signature_data": PNG_SIGNATURE})
        self.assertEqual(signed.status_code, 200)
        self.assertEqual(signed.json()["status"], "SIGNED")
        self.assertIsNotNone(signed.json()["cleared_from_inbox_at"])
        self.assertEqual(self.get("/messages/inbox", "employee").json(), [])

        twice = self.post(f"{path}/sign", "employee", json={"signature_data": PNG_SIGNATURE})
        self.assertEqual(twice.json()["error"], "Message already signed")

    def test_dismiss_reminder(self):
        message = self.send(type="REMINDER", priority="LOW")
        path = f"/messages/{message['id']}"
        self.assertEqual(self.post(f"{path}/sign", "employee", json={"signature_data": PNG_SIGNATURE}).json()["error"],
                         "Only toolbox talks can be signed")

        dismissed = self.post(f"{path}/dismiss", "employee")
        self.assertEqual(dismissed.status_code, 200)
        self.assertEqual(dismissed.json()["status"], "DISMISSED")
        self.assertEqual(self.get("/messages/inbox", "employee").json(), [])


class TestManagingMessages(MessageTestCase):

    def test_soft_delete(self):
        message = self.send(recipients=("employee", "employee2"))
        self.post(f"/messages/{message['id']}/sign", "employee", json={"signature_data": PNG_SIGNATURE})

        self.assertEqual(self.delete(f"/messages/{message['id']}", "employee").status_code, 403)
        self.assertEqual(self.delete(f"/messages/{message['id']}", "manager").status_code, 204)

        self.assertEqual(self.get("/messages/inbox", "employee2").json(), [])
        self.assertEqual(self.get("/messages/", "manager").json(), [])
        self.assertEqual(self.post(f"/messages/{message['id']}/shown", "employee2").status_code, 404)
        self.assertEqual(self.delete(f"/messages/{message['id']}", "manager").status_code, 404)

    def test_export_signatures(self):
        message = self.send(recipients=("employee", "employee2"))
        self.post(f"/messages/{message['id']}/sign", "employee", json={"signature_data": PNG_SIGNATURE})

        response = self.get(f"/messages/{message['id']}/export", "manager")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.content.startswith(b"%PDF"))
        self.assertIn("Toolbox_Talk_Manual_Handling.pdf", response.headers["content-disposition"])

        reminder = self.send(type="REMINDER")
        self.assertEqual(self.get(f"/messages/{reminder['id']}/export", "manager").status_code, 400)


if __name__ == "__main__":
    unittest.main()
