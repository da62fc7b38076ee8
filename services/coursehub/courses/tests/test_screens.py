from ._shared import *  # noqa: F401,F403


class AccessGateTests(TestCase):
    def test_signed_out_visitor_is_sent_to_login(self):
        for path in ("/", "/courses", "/courses/intro", "/admin", "/pending", "/random"):
            with self.subTest(path=path):
                resp = self.client.get(path)
                self.assertEqual(resp.status_code, 302)
                self.assertEqual(resp["Location"], "/login")

    def test_signed_out_visitor_sees_login_and_signup(self):
        for path in ("/login", "/signup"):
            with self.subTest(path=path):
                resp = self.client.get(path)
                self.assertEqual(resp.status_code, 200)
                self.assertEqual(resp["Cache-Control"], "private, no-store")

    def test_first_visit_creates_inactive_profile_and_pends(self):
        user = _make_user("ada")
        self.client.force_login(user)
        resp = self.client.get("/courses")
        self.assertEqual(resp.status_code, 302)
        self.assertEqual(resp["Location"], "/pending")
        profile = Profile.objects.get(user_id=user.id)
        self.assertFalse(profile.is_active)

        resp = self.client.get("/pending")
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "@ada")

    def test_active_learner_cannot_reach_admin_or_signup(self):
        user, _profile = _make_learner("ada", is_active=True)
        self.client.force_login(user)
        self.assertEqual(self.client.get("/admin")["Location"], "/courses")
        self.assertEqual(self.client.get("/login")["Location"], "/courses")
        self.assertEqual(self.client.get("/pending")["Location"], "/courses")
        self.assertEqual(self.client.get("/")["Location"], "/courses")
        self.assertEqual(self.client.get("/signup")["Location"], "/pending")

    def test_activation_takes_effect_on_next_request(self):
        user, profile = _make_learner("ada")
        self.client.force_login(user)
        self.assertEqual(self.client.get("/courses")["Location"], "/pending")

        profile.is_active = True
        profile.save(update_fields=["is_active"])
        self.assertEqual(self.client.get("/courses").status_code, 200)

    def test_profile_lookup_failure_renders_error_page(self):
        user, _profile = _make_learner("ada", is_active=True)
        self.client.force_login(user)
        with patch("courses.services.profiles.Profile.objects.get", side_effect=DatabaseError("down")):
            resp = self.client.get("/courses")
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp["Cache-Control"], "private, no-store")
        self.assertContains(resp, "Could not load your profile.", status_code=503)

    def test_healthz_bypasses_gate(self):
        resp = self.client.get("/healthz")
        self.assertEqual(resp.status_code, 200)

    def test_media_urls_bypass_gate(self):
        user, _profile = _make_learner("ada", is_active=True)
        self.client.force_login(user)
        resp = self.client.get("/media/course-assets/image/missing.png")
        self.assertEqual(resp.status_code, 404)

    @override_settings(MEDIA_URL="/assets/", STATIC_URL="/files/")
    def test_configured_media_and_static_urls_bypass_gate(self):
        user, _profile = _make_learner("ada", is_active=True)
        self.client.force_login(user)
        for path in ("/assets/course-assets/image/a.png", "/files/css/app.css"):
            with self.subTest(path=path):
                resp = self.client.get(path)
                self.assertNotEqual(resp.status_code, 302)
                self.assertFalse(resp.has_header("Location"))


class AccountFlowTests(TestCase):
    def test_signup_creates_identity_and_lands_on_pending(self):
        resp = self.client.post(
            "/signup",
            {"username": "Ada_L", "password": "secret123", "confirm_password": "secret123"},
        )
        self.assertEqual(resp.status_code, 302)
        self.assertEqual(resp["Location"], "/pending")

        user = get_user_model().objects.get(username="ada_l@gzdlab.com")
        self.assertEqual(user.email, "ada_l@gzdlab.com")
        self.assertEqual(user.first_name, "ada_l")

        resp = self.client.get("/pending")
        self.assertEqual(resp.status_code, 200)
        profile = Profile.objects.get(user_id=user.id)
        self.assertEqual(profile.username, "ada_l")
        self.assertFalse(profile.is_active)

    def test_signup_rejects_taken_username(self):
        _make_user("ada")
        resp = self.client.post(
            "/signup",
            {"username": "ada", "password": "secret123", "confirm_password": "secret123"},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "That username is already taken.")

    def test_signup_form_validation(self):
        cases = [
            ({"username": "ab", "password": "secret123", "confirm_password": "secret123"}, "at least 3"),
            ({"username": "bad name", "password": "secret123", "confirm_password": "secret123"}, "letters, digits"),
            ({"username": "ada", "password": "12345", "confirm_password": "12345"}, "at least 6"),
            ({"username": "ada", "password": "secret123", "confirm_password": "secret124"}, "do not match"),
        ]
        for data, message in cases:
            with self.subTest(message=message):
                resp = self.client.post("/signup", data)
                self.assertEqual(resp.status_code, 200)
                self.assertContains(resp, message)
        self.assertEqual(get_user_model().objects.count(), 0)

    def test_login_with_wrong_password_shows_error(self):
        _make_user("ada", password="secret123")
        resp = self.client.post("/login", {"username": "ada", "password": "wrong-pass"})
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "Invalid username or password.")

    def test_login_is_case_insensitive_on_username(self):
        _make_learner("ada", is_active=True, password="secret123")
        resp = self.client.post("/login", {"username": "ADA", "password": "secret123"})
        self.assertEqual(resp.status_code, 302)
        self.assertEqual(resp["Location"], "/courses")
        self.assertEqual(self.client.get("/courses").status_code, 200)

    def test_logout_returns_to_login(self):
        user, _profile = _make_learner("ada", is_active=True)
        self.client.force_login(user)
        resp = self.client.post("/logout")
        self.assertEqual(resp.status_code, 302)
        self.assertEqual(resp["Location"], "/login")
        self.assertEqual(self.client.get("/courses")["Location"], "/login")

    def test_logout_requires_post(self):
        self.assertEqual(self.client.get("/logout").status_code, 405)


class CoursePageScreenTests(TestCase):
    def setUp(self):
        user, _profile = _make_learner("ada", is_active=True)
        self.client.force_login(user)

    def test_list_is_ordered_and_links_by_slug(self):
        CoursePage.objects.create(slug="工具", title="02-工具", sort_order=2, md_content="# Tools")
        CoursePage.objects.create(slug="开场白", title="第一课-开场白", sort_order=1, md_content="# Hi")
        resp = self.client.get("/courses")
        self.assertEqual(resp.status_code, 200)
        body = resp.content.decode("utf-8")
        self.assertLess(body.index("第一课-开场白"), body.index("02-工具"))
        self.assertEqual([p.slug for p in resp.context["pages"]], ["开场白", "工具"])

    def test_empty_list_shows_empty_state(self):
        resp = self.client.get("/courses")
        self.assertContains(resp, "No courses have been published yet.")

    def test_list_store_failure_offers_retry(self):
        with patch("courses.views.content.CoursePage.objects.defer", side_effect=DatabaseError("down")):
            resp = self.client.get("/courses")
        self.assertEqual(resp.status_code, 503)
        self.assertContains(resp, "Try again", status_code=503)

    def test_detail_renders_sanitized_markdown(self):
        CoursePage.objects.create(
            slug="intro",
            title="Intro",
            sort_order=1,
            md_content="# Welcome\n\n![d](/media/course-assets/image/d.png)\n\n<script>alert(1)</script>",
        )
        resp = self.client.get("/courses/intro")
        self.assertEqual(resp.status_code, 200)
        html = resp.content.decode("utf-8")
        self.assertIn("Welcome</h1>", html)
        self.assertIn('src="/media/course-assets/image/d.png"', html)
        self.assertNotIn("<script>alert(1)</script>", html)

    def test_detail_with_cjk_slug(self):
        CoursePage.objects.create(slug="开场白", title="第一课-开场白", sort_order=1, md_content="你好")
        resp = self.client.get("/courses/开场白")
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "你好")

    def test_unknown_slug_is_not_found(self):
        resp = self.client.get("/courses/missing")
        self.assertEqual(resp.status_code, 404)
        self.assertContains(resp, "does not exist", status_code=404)


class AdminScreenTests(TestCase):
    def setUp(self):
        self.admin_user, _profile = _make_learner("boss", is_active=True, is_admin=True)
        self.client.force_login(self.admin_user)

    def test_admin_sees_pending_and_active_users(self):
        _make_learner("waiting")
        _make_learner("reader", is_active=True)
        resp = self.client.get("/admin")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([p.username for p in resp.context["pending_profiles"]], ["waiting"])
        self.assertEqual(
            sorted(p.username for p in resp.context["active_profiles"]),
            ["boss", "reader"],
        )
        self.assertEqual(resp.context["total"], 3)

    def test_toggle_active_sets_submitted_value(self):
        user, _profile = _make_learner("waiting")
        resp = self.client.post(f"/admin/users/{user.id}/toggle-active", {"value": "1"})
        self.assertEqual(resp.status_code, 302)
        self.assertEqual(resp["Location"], "/admin")
        self.assertTrue(Profile.objects.get(user_id=user.id).is_active)

        self.client.post(f"/admin/users/{user.id}/toggle-active", {"value": "0"})
        self.assertFalse(Profile.objects.get(user_id=user.id).is_active)

    def test_repeated_activate_keeps_user_active(self):
        user, _profile = _make_learner("waiting")
        for _ in range(2):
            self.client.post(f"/admin/users/{user.id}/toggle-active", {"value": "1"})
        self.assertTrue(Profile.objects.get(user_id=user.id).is_active)

    def test_toggle_without_value_changes_nothing(self):
        user, _profile = _make_learner("waiting")
        resp = self.client.post(f"/admin/users/{user.id}/toggle-active")
        self.assertIn("notice=Invalid+request.", resp["Location"])
        self.assertFalse(Profile.objects.get(user_id=user.id).is_active)

    def test_toggle_admin_sets_submitted_value(self):
        user, _profile = _make_learner("reader", is_active=True)
        self.client.post(f"/admin/users/{user.id}/toggle-admin", {"value": "1"})
        self.assertTrue(Profile.objects.get(user_id=user.id).is_admin)

    def test_admin_forms_post_target_values(self):
        _make_learner("waiting")
        resp = self.client.get("/admin")
        self.assertContains(resp, '<input type="hidden" name="value" value="1"><button type="submit" class="activate-btn">')
        self.assertContains(resp, '<input type="hidden" name="value" value="0"><button type="submit" class="deactivate-btn">')

    def test_toggle_unknown_user_reports_notice(self):
        resp = self.client.post("/admin/users/999/toggle-active", {"value": "1"})
        self.assertEqual(resp.status_code, 302)
        self.assertIn("notice=User+not+found.", resp["Location"])

    def test_toggle_requires_post(self):
        user, _profile = _make_learner("waiting")
        self.assertEqual(self.client.get(f"/admin/users/{user.id}/toggle-active").status_code, 405)

    def test_non_admin_cannot_toggle(self):
        learner, _profile = _make_learner("reader", is_active=True)
        target, _target_profile = _make_learner("waiting")
        client = Client()
        client.force_login(learner)
        resp = client.post(f"/admin/users/{target.id}/toggle-active", {"value": "1"})
        self.assertEqual(resp["Location"], "/courses")
        self.assertFalse(Profile.objects.get(user_id=target.id).is_active)
