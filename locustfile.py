"""
Load test for the balance endpoint.

Run: locust -f locustfile.py --host http://localhost:3030
Addresses come from addresses.csv (column "address") when present,
otherwise the default Anvil dev accounts are used.
"""

import csv
import os
import random

from locust import HttpUser, between, task

ANVIL_ACCOUNTS = [
    "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266",
    "0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
    "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC",
    "0x90F79bf6EB2c4f870365E785982E1f101E93b906",
]

addresses = ANVIL_ACCOUNTS
if os.path.exists("addresses.csv"):
    with open("addresses.csv") as f:
        addresses = [row["address"] for row in csv.DictReader(f)] or ANVIL_ACCOUNTS


class BalanceUser(HttpUser):
    wait_time = between(1, 2)

    @task(10)
    def balance(self):
        address = random.choice(addresses)
        self.client.get(f"/balance/{address}/balance", name="/balance/[address]/balance")

    @task(1)
    def health(self):
        self.client.get("/health")
