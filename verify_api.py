import requests
import json

BASE_URL = "http://localhost:8000/api/v1"
EMAIL = "verify_cart@example.com"
PASSWORD = "SecurePassword123!"
ORIGIN = {"X-Storage-Origin": "verify-script"}

def print_response(name, response):
    print(f"--- {name} ---")
    print(f"Status: {response.status_code}")
    try:
        print(json.dumps(response.json(), indent=2))
    except ValueError:
        print(response.text)
    print("\n")

def run_verification():
    # 1. Register (400 on re-runs is fine)
    print("1. Registering User...")
    resp = requests.post(f"{BASE_URL}/auth/register", json={"email": EMAIL, "password": PASSWORD})
    print_response("Register", resp)

    # 2. Anonymous add should be refused with a login toast
    print("2. Adding to cart without login...")
    product = {"_id": "p1", "name": "Kitenge Maxi Dress", "price": 4500, "image": "/images/kitenge.jpg"}
    resp = requests.post(f"{BASE_URL}/cart/add", headers=ORIGIN, json={"product": product, "size": "M"})
    print_response("Anonymous Add", resp)

    # 3. Login
    print("3. Logging in...")
    resp = requests.post(f"{BASE_URL}/auth/token", data={"username": EMAIL, "password": PASSWORD})
    print_response("Login", resp)
    if resp.status_code != 200:
        print("Login failed, aborting.")
        return
    headers = {**ORIGIN, "Authorization": f"Bearer {resp.json()['access_token']}"}

    # 4. Add the same configuration twice, then another size
    print("4. Adding items...")
    requests.post(f"{BASE_URL}/cart/add", headers=headers, json={"product": product, "quantity": 2, "size": "M", "color": "Red"})
    requests.post(f"{BASE_URL}/cart/add", headers=headers, json={"product": product, "quantity": 1, "size": "M", "color": "Red"})
    resp = requests.post(f"{BASE_URL}/cart/add", headers=headers, json={"product": product, "size": "L", "color": "Red"})
    print_response("Cart After Adds", resp)

    # 5. Update and remove
    print("5. Updating quantity to 0 (removes line)...")
    resp = requests.put(f"{BASE_URL}/cart/update/p1-L-Red-", headers=ORIGIN, json={"quantity": 0})
    print_response("Cart After Update", resp)

    # 6. Summary and checkout preview
    print("6. Cart summary and checkout...")
    print_response("Summary", requests.get(f"{BASE_URL}/cart/summary", headers=ORIGIN))
    print_response("Checkout", requests.get(f"{BASE_URL}/cart/checkout", headers=ORIGIN, params={"shipping_option": "express"}))

    # 7. Clear
    print("7. Clearing cart...")
    print_response("Clear", requests.delete(f"{BASE_URL}/cart/clear", headers=ORIGIN))

if __name__ == "__main__":
    run_verification()
