# asv benchmarks, see "Writing benchmarks" in the asv docs

from sklearn.datasets import make_friedman1
from sklearn.model_selection import train_test_split

from itkit.sre import ITRegressor


class Friedman1Suite:
    """"""
    params = ["ites", "itls", "symtree"]
    param_names = ["strategy"]
    X, y = make_friedman1(n_samples=200, n_features=5, noise=0.1, random_state=42)
    X_train, X_test, y_train, y_test = train_test_split(X, y, test_size=0.3, random_state=42)

    def setup(self, strategy):
        self.sre = ITRegressor(
            strategy=strategy,
            population_size=50,
            n_iter=3 if strategy == "symtree" else 10,
            random_state=42,
        )

    def time_fit(self, strategy):
        self.sre.fit(self.X_train, self.y_train)

    def mem_fit(self, strategy):
        self.sre.fit(self.X_train, self.y_train)

    def track_r2_score(self, strategy):
        self.sre.fit(self.X_train, self.y_train)
        return self.sre.score(self.X_test, self.y_test)

    def track_n_terms(self, strategy):
        self.sre.fit(self.X_train, self.y_train)
        return len(self.sre.model_)
