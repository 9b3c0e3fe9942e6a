from carebook.models.appointment import Appointment, AppointmentStatus, PaymentStatus
from tests.utils import auth_headers, book, register

class TestDoctorListing:

    def test_only_approved_doctors_listed(self, client, customer, approved_doctor):
        register(client, "drgrey", "grey@org.doctor")

        response = client.get("/api/customer/doctors", headers=auth_headers(customer["token"]))
        assert response.status_code == 200

        doctors = response.json()
        assert len(doctors) == 1
        assert doctors[0]["userId"] == approved_doctor["user"]["id"]
        assert doctors[0]["user"]["username"] == "drhouse"
        assert doctors[0]["isApproved"] is True

    def test_doctors_cannot_use_customer_routes(self, client, doctor):
        response = client.get("/api/customer/doctors", headers=auth_headers(doctor["token"]))
        assert response.status_code == 403
        assert response.json()["msg"] == "Access denied, not a customer"

    def test_admin_may_act_as_customer(self, client, admin, approved_doctor):
        response = client.get("/api/customer/doctors", headers=auth_headers(admin["token"]))
        assert response.status_code == 200

class TestBooking:

    def test_book_approved_doctor(self, client, customer, approved_doctor):
        response = book(
            client, customer, approved_doctor,
            documents=["blood-test.pdf", "x-ray.png"], notes="Chest pain", isEmergency=True
        )
        assert response.status_code == 201

        data = response.json()["appointment"]
        assert data["status"] == "pending"
        assert data["paymentStatus"] == "pending"
        assert data["customerId"] == customer["user"]["id"]
        assert data["doctorId"] == approved_doctor["user"]["id"]
        assert data["documents"] == ["blood-test.pdf", "x-ray.png"]
        assert data["isEmergency"] is True

    def test_book_unapproved_doctor(self, client, customer, doctor, db_session):
        response = book(client, customer, doctor)
        assert response.status_code == 400
        assert response.json()["msg"] == "Doctor not found or not yet approved."
        assert db_session.query(Appointment).count() == 0

    def test_book_unknown_doctor(self, client, customer):
        response = book(client, customer, {"user": {"id": 9999}})
        assert response.status_code == 400

    def test_book_requires_date_and_time(self, client, customer, approved_doctor):
        response = client.post(
            "/api/customer/appointments",
            json={"doctorId": approved_doctor["user"]["id"]},
            headers=auth_headers(customer["token"])
        )
        assert response.status_code == 400

    def test_my_appointments_newest_first(self, client, customer, approved_doctor):
        first = book(client, customer, approved_doctor, date="2025-06-24").json()["appointment"]
        second = book(client, customer, approved_doctor, date="2025-06-20").json()["appointment"]

        response = client.get("/api/customer/appointments/me", headers=auth_headers(customer["token"]))
        assert response.status_code == 200

        data = response.json()
        assert [a["id"] for a in data] == [second["id"], first["id"]]
        assert data[0]["doctor"]["email"] == "house@org.doctor"

class TestCancel:

    def test_cancel_pending(self, client, customer, appointment):
        response = client.put(
            f"/api/customer/appointments/{appointment['id']}/cancel",
            headers=auth_headers(customer["token"])
        )
        assert response.status_code == 200
        assert response.json()["appointment"]["status"] == "cancelled"

    def test_cancel_paid_scheduled(self, client, customer, appointment):
        client.post(
            f"/api/customer/appointments/{appointment['id']}/pay",
            json={"paymentMethod": "card"},
            headers=auth_headers(customer["token"])
        )

        response = client.put(
            f"/api/customer/appointments/{appointment['id']}/cancel",
            headers=auth_headers(customer["token"])
        )
        assert response.status_code == 200
        assert response.json()["appointment"]["status"] == "cancelled"
        assert response.json()["appointment"]["paymentStatus"] == "paid"

    def test_cancel_twice(self, client, customer, appointment):
        url = f"/api/customer/appointments/{appointment['id']}/cancel"
        client.put(url, headers=auth_headers(customer["token"]))

        response = client.put(url, headers=auth_headers(customer["token"]))
        assert response.status_code == 400
        assert response.json()["msg"] == "Appointment is already cancelled."

    def test_cancel_completed(self, client, customer, approved_doctor, appointment):
        client.put(
            f"/api/doctor/appointments/{appointment['id']}/status",
            json={"status": "completed"},
            headers=auth_headers(approved_doctor["token"])
        )

        response = client.put(
            f"/api/customer/appointments/{appointment['id']}/cancel",
            headers=auth_headers(customer["token"])
        )
        assert response.status_code == 400
        assert response.json()["msg"] == "Cannot cancel a completed appointment."

    def test_cancel_someone_elses(self, client, appointment):
        other = register(client, "bob", "bob@example.com")

        response = client.put(
            f"/api/customer/appointments/{appointment['id']}/cancel",
            headers=auth_headers(other["token"])
        )
        assert response.status_code == 401

class TestPayment:

    def test_pay_pending_schedules(self, client, customer, appointment):
        response = client.post(
            f"/api/customer/appointments/{appointment['id']}/pay",
            json={"paymentMethod": "upi"},
            headers=auth_headers(customer["token"])
        )
        assert response.status_code == 200

        data = response.json()
        assert data["msg"] == "Payment successful via upi! Appointment is now scheduled."
        assert data["appointment"]["status"] == "scheduled"
        assert data["appointment"]["paymentStatus"] == "paid"

    def test_pay_twice(self, client, customer, appointment, db_session):
        url = f"/api/customer/appointments/{appointment['id']}/pay"
        client.post(url, json={"paymentMethod": "upi"}, headers=auth_headers(customer["token"]))

        response = client.post(url, json={"paymentMethod": "card"}, headers=auth_headers(customer["token"]))
        assert response.status_code == 400
        assert response.json()["msg"] == "Payment has already been made for this appointment."

        stored = db_session.get(Appointment, appointment["id"])
        assert stored.status == AppointmentStatus.SCHEDULED
        assert stored.payment_status == PaymentStatus.PAID

    def test_pay_cancelled(self, client, customer, appointment):
        client.put(
            f"/api/customer/appointments/{appointment['id']}/cancel",
            headers=auth_headers(customer["token"])
        )

        response = client.post(
            f"/api/customer/appointments/{appointment['id']}/pay",
            json={"paymentMethod": "upi"},
            headers=auth_headers(customer["token"])
        )
        assert response.status_code == 400
        assert response.json()["msg"] == "Cannot pay for an appointment with status: cancelled"

    def test_pay_someone_elses(self, client, appointment):
        other = register(client, "bob", "bob@example.com")

        response = client.post(
            f"/api/customer/appointments/{appointment['id']}/pay",
            json={"paymentMethod": "upi"},
            headers=auth_headers(other["token"])
        )
        assert response.status_code == 401

    def test_pay_missing_appointment(self, client, customer):
        response = client.post(
            "/api/customer/appointments/9999/pay",
            json={"paymentMethod": "upi"},
            headers=auth_headers(customer["token"])
        )
        assert response.status_code == 404

    def test_oversized_id_is_rejected(self, client, customer):
        for method, action in (("put", "cancel"), ("post", "pay")):
            response = client.request(
                method, f"/api/customer/appointments/99999999999999999999/{action}",
                json={"paymentMethod": "upi"},
                headers=auth_headers(customer["token"])
            )
            assert response.status_code == 400
            assert "appointment_id" in response.json()["msg"]
