def auth_headers(token):
    return {"x-auth-token": token}


def register(client, username, email, password="Password123"):
    """Register a user and return their token and stored record."""
    response = client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password}
    )
    assert response.status_code == 200, response.text
    token = response.json()["token"]
    user = client.get("/api/auth/user", headers=auth_headers(token)).json()
    return {"token": token, "user": user}


def book(client, customer, doctor, **overrides):
    payload = {
        "doctorId": doctor["user"]["id"],
        "date": "2025-06-24",
        "time": "10:00",
    }
    payload.update(overrides)
    return client.post(
        "/api/customer/appointments",
        json=payload,
        headers=auth_headers(customer["token"])
    )
